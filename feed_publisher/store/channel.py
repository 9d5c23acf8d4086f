import logging

from feed_publisher.models import SETTINGS_ID, FeedSettings
from feed_publisher.store import store_errors
from feed_publisher.store.updates import build_changes

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "title",
    "description",
    "link",
    "language",
    "copyright",
    "managing_editor",
    "webmaster",
    "generator",
    "image_url",
    "image_title",
    "image_link",
)


def get_settings():
    """Return the channel settings row, or None before the schema is seeded."""
    with store_errors():
        return FeedSettings.get_or_none(FeedSettings.id == SETTINGS_ID)


def update_settings(values):
    changes = build_changes(FeedSettings, UPDATABLE_FIELDS, values)
    with store_errors():
        FeedSettings.update(dict(changes)).where(FeedSettings.id == SETTINGS_ID).execute()
    logger.info("Updated settings: %s", ", ".join(f.name for f, _ in changes))
