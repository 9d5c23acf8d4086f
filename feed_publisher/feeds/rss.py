from datetime import datetime, timezone
from email.utils import format_datetime

from .document import FeedDocument

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
ATOM_NS = "http://www.w3.org/2005/Atom"
DEFAULT_GENERATOR = "PolySend.io Notification Service"


def rfc2822(value):
    """Format a stored (naive UTC) datetime as an RFC 2822 GMT date."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def render_rss(settings, items, base_url, now=None):
    """
    Render the channel and its items as an RSS 2.0 document.

    `items` are rendered in the order given. Optional channel elements are
    left out entirely when their setting is empty.
    """
    base_url = base_url.rstrip("/")
    now = now or datetime.now(timezone.utc)
    channel_link = settings.link or base_url

    doc = FeedDocument("rss", {
        "version": "2.0",
        "xmlns:content": CONTENT_NS,
        "xmlns:atom": ATOM_NS,
    })
    channel = doc.element(doc.root, "channel")

    doc.field(channel, "title", settings.title)
    doc.field(channel, "description", settings.description)
    doc.field(channel, "link", channel_link)
    doc.element(channel, "atom:link", {
        "href": f"{base_url}/feed.xml",
        "rel": "self",
        "type": "application/rss+xml",
    })
    doc.field(channel, "language", settings.language)
    doc.field(channel, "lastBuildDate", rfc2822(now))
    doc.field(channel, "generator", settings.generator or DEFAULT_GENERATOR)

    if settings.copyright:
        doc.field(channel, "copyright", settings.copyright)
    if settings.managing_editor:
        doc.field(channel, "managingEditor", settings.managing_editor)
    if settings.webmaster:
        doc.field(channel, "webMaster", settings.webmaster)
    if settings.image_url:
        image = doc.element(channel, "image")
        doc.field(image, "url", settings.image_url)
        doc.field(image, "title", settings.image_title or settings.title)
        doc.field(image, "link", settings.image_link or channel_link)

    for item in items:
        entry = doc.element(channel, "item")
        doc.field(entry, "title", item.title)
        doc.field(entry, "description", item.description or "")
        if item.content:
            doc.field(entry, "content:encoded", item.content)
        if item.link:
            doc.field(entry, "link", item.link)
        if item.author:
            doc.field(entry, "author", item.author)
        if item.category:
            doc.field(entry, "category", item.category)
        doc.field(entry, "guid", item.guid or item.id, {"isPermaLink": "false"})
        doc.field(entry, "pubDate", rfc2822(item.pub_date))

    return doc.tostring()
