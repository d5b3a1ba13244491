import logging
from functools import wraps

import jwt
from flask import g, request

from campus_connect.models.users import User, Identity
from campus_connect.services.access_control import role_gate
from campus_connect.utils.db import get_db
from campus_connect.utils.errors import AuthenticationError
from campus_connect.utils.tokens import decode_token

logger = logging.getLogger(__name__)


def _bearer_token():
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[len("Bearer "):].strip() or None


def resolve_identity(token):
    try:
        claims = decode_token(token)
    except jwt.InvalidTokenError as e:
        logger.debug("Token verification failed: %s", e)
        raise AuthenticationError("Not authorized, token failed") from None

    user = User.find_by_id(get_db(), claims["id"])
    if not user:
        raise AuthenticationError("Not authorized, user not found")

    try:
        return Identity.from_doc(user)
    except ValueError as e:
        logger.warning("Rejecting token: %s", e)
        raise AuthenticationError("Not authorized, user not found") from None


# This decorator makes sure that only requests carrying a valid bearer token
# reach the view; the caller is available as g.current_user
def protect(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise AuthenticationError("Not authorized, no token provided")
        g.current_user = resolve_identity(token)
        return view_function(*args, **kwargs)
    return decorated_function


# Role allow-list for a route; apply below @protect
def authorize_roles(*roles):
    def decorator(view_function):
        @wraps(view_function)
        def decorated_function(*args, **kwargs):
            identity = getattr(g, "current_user", None)
            if identity is None:
                raise AuthenticationError("User not authenticated")
            role_gate(roles, identity).raise_for_denial()
            return view_function(*args, **kwargs)
        return decorated_function
    return decorator


def current_user():
    return g.current_user
