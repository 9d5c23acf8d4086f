from .jsonfeed import render_json_feed
from .rss import render_rss

__all__ = ["render_json_feed", "render_rss"]
