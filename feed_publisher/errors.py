"""
Error types raised by the stores and the auth guard.
Each carries the HTTP status the router answers with.
"""


class FeedError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class ValidationError(FeedError):
    status_code = 400
    default_message = "Bad Request"


class AuthError(FeedError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(FeedError):
    status_code = 404
    default_message = "Not Found"


class StoreError(FeedError):
    """Any failure reported by the database, constraint violations included."""
    status_code = 500
