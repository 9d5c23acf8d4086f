import logging
import math
import uuid
from dataclasses import dataclass
from datetime import timezone

from feed_publisher.errors import ValidationError
from feed_publisher.models import FeedItem, utcnow
from feed_publisher.store import store_errors
from feed_publisher.store.updates import build_changes

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "content", "link", "author", "category", "published")


@dataclass
class ItemPage:
    items: list
    page: int
    limit: int
    total: int

    @property
    def total_pages(self):
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)


def generate_guid():
    return str(uuid.uuid4())


def _newest_first(query):
    return query.order_by(FeedItem.pub_date.desc(), FeedItem.id.desc())


def _as_utc(value):
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def published_items(category=None, limit=20):
    """Items visible in the public feeds, newest first."""
    query = FeedItem.select().where(FeedItem.published == True)  # noqa: E712
    if category:
        query = query.where(FeedItem.category == category)
    with store_errors():
        return list(_newest_first(query).limit(limit))


def list_items(category=None, published=None, page=1, limit=20):
    """
    Admin listing over every item. `published` is tri-state: None lists
    everything, True/False match exactly. Page and limit are taken as given.
    """
    query = FeedItem.select()
    if category:
        query = query.where(FeedItem.category == category)
    if published is not None:
        query = query.where(FeedItem.published == published)

    with store_errors():
        total = query.count()
        items = list(_newest_first(query).paginate(page, limit))
    return ItemPage(items=items, page=page, limit=limit, total=total)


def create_item(title, description=None, content=None, link=None, author=None,
                category=None, guid=None, published=True, pub_date=None):
    """Insert an item and return (id, guid). A duplicate guid raises StoreError."""
    if not title:
        raise ValidationError("Title is required")

    guid = guid or generate_guid()
    now = utcnow()
    with store_errors():
        item_id = FeedItem.insert(
            title=title,
            description=description or "",
            content=content or "",
            link=link or "",
            author=author or "",
            category=category or "",
            guid=guid,
            published=bool(published),
            pub_date=_as_utc(pub_date) or now,
            updated_at=now,
            created_at=now,
        ).execute()

    logger.info("Created item %s (%s)", item_id, guid)
    return item_id, guid


def update_item(item_id, values):
    """
    Apply the supplied subset of UPDATABLE_FIELDS to one item.
    Unknown ids are not an error; the returned row count is 0.
    """
    if "published" in values:
        values = dict(values, published=bool(values["published"]))
    changes = build_changes(FeedItem, UPDATABLE_FIELDS, values)
    with store_errors():
        count = FeedItem.update(dict(changes)).where(FeedItem.id == item_id).execute()

    if not count:
        logger.info("Update matched no item for id %r", item_id)
    return count


def delete_item(item_id):
    """Delete one item. Unknown ids are not an error; the returned row count is 0."""
    with store_errors():
        count = FeedItem.delete().where(FeedItem.id == item_id).execute()

    if not count:
        logger.info("Delete matched no item for id %r", item_id)
    return count
