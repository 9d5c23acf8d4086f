import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from playhouse.shortcuts import model_to_dict
from starlette.exceptions import HTTPException as StarletteHTTPException

from feed_publisher import models
from feed_publisher.auth import authorize
from feed_publisher.config import Settings
from feed_publisher.errors import AuthError, FeedError, StoreError
from feed_publisher.feeds import render_json_feed, render_rss
from feed_publisher.schemas import BroadcastIn, ItemIn, ItemUpdate, SettingsUpdate
from feed_publisher.store import channel
from feed_publisher.store import items as item_store

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}
FEED_CACHE_CONTROL = "public, max-age=300"
RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"
JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def _base_url(request):
    return str(request.base_url).rstrip("/")


def _item_id(item_path):
    # First segment after /items/, unvalidated
    return item_path.split("/")[0]


def _channel():
    row = channel.get_settings()
    if row is None:
        raise StoreError("Feed settings are missing")
    return row


def create_app(settings: Settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up: connecting to %s", settings.database_url)
        database = models.connect_database(settings.database_url)
        models.init_schema()
        yield
        logger.info("Shutting down: closing database connection")
        database.close()

    app = FastAPI(
        title="PolySend Feed",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    @app.middleware("http")
    async def guard_and_cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(headers=CORS_HEADERS)
        if not authorize(request):
            return PlainTextResponse(
                AuthError.default_message,
                status_code=AuthError.status_code,
                headers=CORS_HEADERS,
            )
        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # Error handlers
    @app.exception_handler(FeedError)
    async def feed_error(request: Request, exc: FeedError):
        if exc.status_code >= 500:
            logger.error("Error in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
            detail = str(exc) if settings.expose_errors else StoreError.default_message
            return PlainTextResponse(f"Error: {detail}", status_code=exc.status_code)
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        where = ".".join(str(part) for part in first.get("loc", ()))
        return PlainTextResponse(f"Invalid request: {where}: {first.get('msg', '')}", status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods are both "not found"
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("Unhandled error in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        detail = str(exc) if settings.expose_errors else StoreError.default_message
        return PlainTextResponse(f"Error: {detail}", status_code=500, headers=CORS_HEADERS)

    # Public feeds
    @app.get("/feed.xml")
    @app.get("/rss.xml")
    @app.get("/feed")
    async def rss_feed(request: Request, limit: int = settings.feed_limit, category: Optional[str] = None):
        rows = item_store.published_items(category=category, limit=limit)
        xml = render_rss(_channel(), rows, _base_url(request))
        return Response(xml, media_type=RSS_MEDIA_TYPE, headers={"Cache-Control": FEED_CACHE_CONTROL})

    @app.get("/feed.json")
    @app.get("/json")
    async def json_feed(request: Request, limit: int = settings.feed_limit, category: Optional[str] = None):
        rows = item_store.published_items(category=category, limit=limit)
        document = render_json_feed(_channel(), rows, _base_url(request))
        return Response(
            json.dumps(document, indent=2, ensure_ascii=False),
            media_type=JSON_MEDIA_TYPE,
            headers={"Cache-Control": FEED_CACHE_CONTROL},
        )

    # Settings
    @app.get("/settings")
    async def read_settings():
        return model_to_dict(_channel())

    @app.post("/settings")
    async def write_settings(body: SettingsUpdate):
        channel.update_settings(body.model_dump(exclude_unset=True))
        return {"message": "Settings updated successfully"}

    # Items
    @app.get("/items")
    async def list_items(
        page: int = 1,
        limit: int = settings.feed_limit,
        category: Optional[str] = None,
        published: Optional[str] = None,
    ):
        flag = None if published is None else published == "true"
        result = item_store.list_items(category=category, published=flag, page=page, limit=limit)
        return {
            "items": [model_to_dict(item) for item in result.items],
            "pagination": {
                "page": result.page,
                "limit": result.limit,
                "total": result.total,
                "totalPages": result.total_pages,
            },
        }

    @app.post("/items")
    async def add_item(body: ItemIn):
        item_id, guid = item_store.create_item(**body.model_dump())
        return {"id": item_id, "guid": guid, "message": "Item added successfully"}

    @app.put("/items/{item_path:path}")
    async def update_item(item_path: str, body: ItemUpdate):
        item_store.update_item(_item_id(item_path), body.model_dump(exclude_unset=True))
        return {"message": "Item updated successfully"}

    @app.delete("/items/{item_path:path}")
    async def delete_item(item_path: str):
        item_store.delete_item(_item_id(item_path))
        return {"message": "Item deleted successfully"}

    @app.post("/broadcast")
    async def broadcast(body: BroadcastIn):
        item_id, guid = item_store.create_item(**body.model_dump())
        logger.info("Broadcast item %s: %s", item_id, body.title)
        return {
            "id": item_id,
            "guid": guid,
            "message": "Item broadcast successfully",
            "feedUrl": "/feed.xml",
        }

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return API_DOCUMENTATION

    return app


API_DOCUMENTATION = """<!DOCTYPE html>
<html>
<head>
  <title>PolySend.io Notification Service API</title>
  <style>
    body { font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; }
    code { background: #f4f4f4; padding: 2px 4px; border-radius: 3px; }
    .endpoint { background: #e8f4f8; padding: 10px; margin: 10px 0; border-radius: 5px; }
  </style>
</head>
<body>
  <h1>PolySend.io Notification Service API</h1>

  <h2>Public Endpoints</h2>
  <div class="endpoint">
    <strong>GET /feed.xml</strong> or <strong>/rss.xml</strong> or <strong>/feed</strong><br>
    Returns the RSS 2.0 feed<br>
    Query params: <code>limit</code> (default: 20), <code>category</code>
  </div>
  <div class="endpoint">
    <strong>GET /feed.json</strong> or <strong>/json</strong><br>
    Returns the JSON Feed 1.1 document<br>
    Query params: <code>limit</code> (default: 20), <code>category</code>
  </div>
  <div class="endpoint">
    <strong>GET /settings</strong><br>
    Returns feed settings (title, description, etc.)
  </div>
  <div class="endpoint">
    <strong>GET /items</strong><br>
    Lists all items, published or not<br>
    Query params: <code>page</code>, <code>limit</code>, <code>category</code>, <code>published</code>
  </div>

  <h2>Admin Endpoints</h2>
  <p>Require <code>Authorization: Bearer &lt;token&gt;</code>.</p>
  <div class="endpoint">
    <strong>POST /broadcast</strong><br>
    Publishes a new item. Body: <code>title</code> (required), <code>description</code>,
    <code>content</code>, <code>link</code>, <code>author</code>, <code>category</code>, <code>published</code>
  </div>
  <div class="endpoint">
    <strong>POST /items</strong><br>
    Creates an item. Same body as /broadcast plus <code>guid</code> and <code>pub_date</code>
  </div>
  <div class="endpoint">
    <strong>PUT /items/{id}</strong><br>
    Updates any of <code>title</code>, <code>description</code>, <code>content</code>,
    <code>link</code>, <code>author</code>, <code>category</code>, <code>published</code>
  </div>
  <div class="endpoint">
    <strong>DELETE /items/{id}</strong><br>
    Deletes an item
  </div>
  <div class="endpoint">
    <strong>POST /settings</strong><br>
    Updates any of <code>title</code>, <code>description</code>, <code>link</code>, <code>language</code>,
    <code>copyright</code>, <code>managing_editor</code>, <code>webmaster</code>, <code>generator</code>,
    <code>image_url</code>, <code>image_title</code>, <code>image_link</code>
  </div>

  <p><a href="https://polysend.io">Visit PolySend.io</a></p>
</body>
</html>"""


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    if not settings.broadcast_token:
        logger.warning("BROADCAST_TOKEN is not set; all admin requests will be rejected")

    logger.info("Starting feed server...")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
