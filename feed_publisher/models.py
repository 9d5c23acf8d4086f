import logging
from datetime import datetime, timezone

from peewee import (
    AutoField,
    BooleanField,
    Check,
    DatabaseProxy,
    DateTimeField,
    IntegerField,
    Model,
    TextField,
)
from playhouse.db_url import connect

logger = logging.getLogger(__name__)

# Bound to a real database by connect_database() at startup
db = DatabaseProxy()

SETTINGS_ID = 1

DEFAULT_SETTINGS = {
    "title": "PolySend Notifications",
    "description": "Latest updates and notifications from PolySend",
    "link": "https://polysend.io",
    "language": "en",
    "generator": "PolySend RSS Service",
}


def utcnow():
    """Naive UTC timestamp, the form every datetime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(Model):
    class Meta:
        database = db


class FeedSettings(BaseModel):
    id = IntegerField(primary_key=True, constraints=[Check("id = 1")])
    title = TextField(null=True, default=DEFAULT_SETTINGS["title"])
    description = TextField(null=True, default=DEFAULT_SETTINGS["description"])
    link = TextField(null=True, default=DEFAULT_SETTINGS["link"])
    language = TextField(null=True, default=DEFAULT_SETTINGS["language"])
    copyright = TextField(null=True, default="")
    managing_editor = TextField(null=True, default="")
    webmaster = TextField(null=True, default="")
    generator = TextField(null=True, default=DEFAULT_SETTINGS["generator"])
    image_url = TextField(null=True, default="")
    image_title = TextField(null=True, default="")
    image_link = TextField(null=True, default="")
    updated_at = DateTimeField(default=utcnow)

    class Meta:
        table_name = "feed_settings"


class FeedItem(BaseModel):
    id = AutoField()
    title = TextField()
    description = TextField(null=True)
    content = TextField(null=True)
    link = TextField(null=True)
    author = TextField(null=True)
    category = TextField(null=True)
    guid = TextField(null=True, unique=True)
    pub_date = DateTimeField(default=utcnow)
    updated_at = DateTimeField(default=utcnow)
    published = BooleanField(default=True)
    created_at = DateTimeField(default=utcnow)

    class Meta:
        table_name = "feed_items"


FeedItem.add_index(FeedItem.index(FeedItem.pub_date.desc(), name="idx_feed_items_pub_date"))
FeedItem.add_index(FeedItem.index(FeedItem.published, name="idx_feed_items_published"))

MODELS = [FeedSettings, FeedItem]


def connect_database(database_url):
    """Point the model proxy at the database named by a playhouse.db_url URL."""
    database = connect(database_url)
    db.initialize(database)
    db.connect(reuse_if_open=True)
    return database


def init_schema():
    """
    Create tables and indexes if missing and seed the settings row.
    Safe to run repeatedly and from racing processes: nothing existing is
    dropped or overwritten.
    """
    db.create_tables(MODELS, safe=True)
    FeedSettings.insert(id=SETTINGS_ID, **DEFAULT_SETTINGS).on_conflict_ignore().execute()
    logger.info("Schema ready: %s", ", ".join(m._meta.table_name for m in MODELS))
