import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from feed_publisher.feeds import render_json_feed, render_rss
from feed_publisher.feeds.document import FeedDocument, cdata_sections
from feed_publisher.feeds.rss import rfc2822
from feed_publisher.models import FeedItem, FeedSettings

ATOM = "{http://www.w3.org/2005/Atom}"
CONTENT = "{http://purl.org/rss/1.0/modules/content/}"
BASE_URL = "https://feeds.example.com"
NOW = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


@pytest.fixture
def feed_settings():
    return FeedSettings(id=1)


@pytest.fixture
def item():
    return FeedItem(
        id=7,
        title="A",
        description="B",
        link="https://x",
        guid="guid-7",
        category="",
        author="",
        content="",
        pub_date=datetime(2026, 1, 2, 3, 4, 5),
        updated_at=datetime(2026, 1, 3, 0, 0, 0),
        published=True,
    )


def parse(xml):
    return ET.fromstring(xml.encode("utf-8"))


class TestCdataSections:
    def test_plain_text(self):
        assert cdata_sections("hello") == ["hello"]

    def test_terminator_is_split(self):
        assert cdata_sections("a]]>b") == ["a]]", ">b"]

    def test_unknown_tag_rejected(self):
        doc = FeedDocument("rss")
        with pytest.raises(ValueError):
            doc.field(doc.root, "enclosure", "x")


class TestRenderRss:
    def test_item_round_trip(self, feed_settings, item):
        xml = render_rss(feed_settings, [item], BASE_URL, now=NOW)

        assert "<title><![CDATA[A]]></title>" in xml
        assert "<description><![CDATA[B]]></description>" in xml
        assert "<link>https://x</link>" in xml

        entry = parse(xml).find("channel/item")
        assert entry.findtext("title") == "A"
        assert entry.findtext("description") == "B"
        assert entry.findtext("link") == "https://x"
        assert entry.findtext("pubDate") == "Fri, 02 Jan 2026 03:04:05 GMT"
        guid = entry.find("guid")
        assert guid.text == "guid-7"
        assert guid.get("isPermaLink") == "false"

    def test_channel_elements(self, feed_settings):
        channel = parse(render_rss(feed_settings, [], BASE_URL, now=NOW)).find("channel")

        assert channel.findtext("title") == "PolySend Notifications"
        assert channel.findtext("link") == "https://polysend.io"
        assert channel.findtext("language") == "en"
        assert channel.findtext("generator") == "PolySend RSS Service"
        assert channel.findtext("lastBuildDate") == "Wed, 04 Mar 2026 05:06:07 GMT"
        self_link = channel.find(f"{ATOM}link")
        assert self_link.get("href") == f"{BASE_URL}/feed.xml"
        assert self_link.get("rel") == "self"

    def test_optional_channel_elements_omitted(self, feed_settings):
        channel = parse(render_rss(feed_settings, [], BASE_URL, now=NOW)).find("channel")
        for tag in ("copyright", "managingEditor", "webMaster", "image"):
            assert channel.find(tag) is None

    def test_optional_channel_elements_present(self):
        feed_settings = FeedSettings(
            id=1,
            link="",
            copyright="(c) 2026 <PolySend>",
            managing_editor="ed@polysend.io",
            webmaster="web@polysend.io",
            image_url="https://polysend.io/logo.png",
        )
        xml = render_rss(feed_settings, [], BASE_URL, now=NOW)
        channel = parse(xml).find("channel")

        assert "<copyright><![CDATA[(c) 2026 <PolySend>]]></copyright>" in xml
        assert channel.findtext("managingEditor") == "ed@polysend.io"
        assert channel.findtext("webMaster") == "web@polysend.io"
        assert channel.findtext("link") == BASE_URL
        image = channel.find("image")
        assert image.findtext("url") == "https://polysend.io/logo.png"
        assert image.findtext("title") == "PolySend Notifications"
        assert image.findtext("link") == BASE_URL

    def test_optional_item_elements(self, feed_settings, item):
        entry = parse(render_rss(feed_settings, [item], BASE_URL, now=NOW)).find("channel/item")
        assert entry.find(f"{CONTENT}encoded") is None
        assert entry.find("author") is None
        assert entry.find("category") is None

        item.content = "<p>Body</p>"
        item.author = "Ops"
        item.category = "status"
        xml = render_rss(feed_settings, [item], BASE_URL, now=NOW)
        entry = parse(xml).find("channel/item")
        assert "<content:encoded><![CDATA[<p>Body</p>]]></content:encoded>" in xml
        assert entry.findtext(f"{CONTENT}encoded") == "<p>Body</p>"
        assert entry.findtext("author") == "Ops"
        assert entry.findtext("category") == "status"

    def test_guid_falls_back_to_id(self, feed_settings, item):
        item.guid = None
        entry = parse(render_rss(feed_settings, [item], BASE_URL, now=NOW)).find("channel/item")
        assert entry.findtext("guid") == "7"

    def test_url_fields_are_escaped(self, feed_settings, item):
        item.link = "https://x/?a=1&b=2"
        xml = render_rss(feed_settings, [item], BASE_URL, now=NOW)
        assert "<link>https://x/?a=1&amp;b=2</link>" in xml
        assert parse(xml).find("channel/item").findtext("link") == "https://x/?a=1&b=2"

    def test_cdata_terminator_in_text(self, feed_settings, item):
        item.title = "before ]]> after"
        entry = parse(render_rss(feed_settings, [item], BASE_URL, now=NOW)).find("channel/item")
        assert entry.findtext("title") == "before ]]> after"

    def test_items_keep_given_order(self, feed_settings, item):
        other = FeedItem(id=8, title="Second", guid="guid-8", pub_date=datetime(2026, 1, 1))
        entries = parse(render_rss(feed_settings, [item, other], BASE_URL, now=NOW)).findall("channel/item")
        assert [e.findtext("title") for e in entries] == ["A", "Second"]


class TestRfc2822:
    def test_naive_is_utc(self):
        assert rfc2822(datetime(2026, 10, 18, 8, 0, 0)) == "Sun, 18 Oct 2026 08:00:00 GMT"

    def test_none(self):
        assert rfc2822(None) == ""


class TestRenderJsonFeed:
    def test_document(self, feed_settings, item):
        document = render_json_feed(feed_settings, [item], BASE_URL + "/")

        assert document["version"] == "https://jsonfeed.org/version/1.1"
        assert document["title"] == "PolySend Notifications"
        assert document["home_page_url"] == "https://polysend.io"
        assert document["feed_url"] == f"{BASE_URL}/feed.json"
        assert document["language"] == "en"

        entry = document["items"][0]
        assert entry["id"] == "guid-7"
        assert entry["title"] == "A"
        assert entry["content_html"] == "B"
        assert entry["summary"] == "B"
        assert entry["url"] == "https://x"
        assert entry["date_published"] == "2026-01-02T03:04:05+00:00"
        assert entry["date_modified"] == "2026-01-03T00:00:00+00:00"

    def test_author_and_tags_omitted_when_empty(self, feed_settings, item):
        entry = render_json_feed(feed_settings, [item], BASE_URL)["items"][0]
        assert "author" not in entry
        assert "tags" not in entry

    def test_author_tags_and_content(self, feed_settings, item):
        item.author = "Ops"
        item.category = "status"
        item.content = "<p>Body</p>"
        entry = render_json_feed(feed_settings, [item], BASE_URL)["items"][0]
        assert entry["author"] == {"name": "Ops"}
        assert entry["tags"] == ["status"]
        assert entry["content_html"] == "<p>Body</p>"

    def test_id_falls_back_to_numeric_id(self, feed_settings, item):
        item.guid = None
        entry = render_json_feed(feed_settings, [item], BASE_URL)["items"][0]
        assert entry["id"] == "7"
