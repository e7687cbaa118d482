"""
Credential bridge exceptions.
"""


class SessionServiceError(Exception):
    """The Session Service failed to produce credentials or a token."""

    pass
