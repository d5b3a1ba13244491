"""Campus Connect: role-based college communication portal API."""

__version__ = "1.0.0"
