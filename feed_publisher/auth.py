import hmac
import logging

from fastapi import Request

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Mutating routes; PUT and DELETE cover every /items/{id}
PROTECTED_POSTS = ("/items", "/broadcast", "/settings")
PROTECTED_ITEM_METHODS = ("PUT", "DELETE")


def is_authorized(header, secret):
    """True iff `header` is a bearer credential equal to the configured secret."""
    if not secret or not header or not header.startswith(BEARER_PREFIX):
        return False
    token = header[len(BEARER_PREFIX):]
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


def requires_token(method, path):
    if method == "POST":
        return path in PROTECTED_POSTS
    return method in PROTECTED_ITEM_METHODS and path.startswith("/items/")


def authorize(request: Request):
    """
    Check the request against the configured token before anything reads
    its body. Returns False (and logs) for a guarded route without a valid
    token; unguarded routes always pass.
    """
    if not requires_token(request.method, request.url.path):
        return True
    settings = request.app.state.settings
    if is_authorized(request.headers.get("Authorization"), settings.broadcast_token):
        return True
    client = request.client.host if request.client else "unknown"
    logger.warning("Rejected %s %s from %s", request.method, request.url.path, client)
    return False
