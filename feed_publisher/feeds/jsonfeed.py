from datetime import timezone

JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


def rfc3339(value):
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _item(item):
    entry = {
        "id": item.guid or str(item.id),
        "title": item.title,
        "content_html": item.content or item.description,
        "summary": item.description,
        "date_published": rfc3339(item.pub_date),
        "date_modified": rfc3339(item.updated_at),
    }
    if item.link:
        entry["url"] = item.link
    # author/tags are omitted, not nulled, when empty
    if item.author:
        entry["author"] = {"name": item.author}
    if item.category:
        entry["tags"] = [item.category]
    return entry


def render_json_feed(settings, items, base_url):
    """Build a JSON Feed 1.1 document (as a dict) for the channel."""
    base_url = base_url.rstrip("/")
    return {
        "version": JSON_FEED_VERSION,
        "title": settings.title,
        "description": settings.description,
        "home_page_url": settings.link,
        "feed_url": f"{base_url}/feed.json",
        "language": settings.language,
        "items": [_item(item) for item in items],
    }
