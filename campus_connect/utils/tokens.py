from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app


def generate_token(user_id):
    """Sign a bearer token carrying the user id, valid for JWT_EXPIRES_DAYS."""
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(user_id),
        "iat": now,
        "exp": now + timedelta(days=current_app.config["JWT_EXPIRES_DAYS"]),
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def decode_token(token):
    # Raises jwt.InvalidTokenError (expired, bad signature, malformed)
    return jwt.decode(
        token,
        current_app.config["JWT_SECRET"],
        algorithms=[current_app.config["JWT_ALGORITHM"]],
        options={"require": ["exp", "iat", "id"]},
    )
