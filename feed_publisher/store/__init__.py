from contextlib import contextmanager

from peewee import PeeweeException

from feed_publisher.errors import StoreError


@contextmanager
def store_errors():
    """Re-raise database failures as StoreError, keeping the driver message."""
    try:
        yield
    except PeeweeException as e:
        raise StoreError(str(e)) from e
