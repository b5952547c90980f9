import movies_library.db.base  # noqa: F401

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi_mcp import FastApiMCP

from movies_library.core.config import settings
from movies_library.api.routes.health import router as health_router
from movies_library.api.routes.browse import router as browse_router
from movies_library.api.routes.search import router as search_router
from movies_library.api.routes.titles import router as titles_router
from movies_library.api.routes.wishlist import router as wishlist_router


logger = logging.getLogger(__name__)
app = FastAPI(title="Movies Library API", version="0.1.0")

local_cors_origin_regex = (
    r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"
    if settings.env in {"local", "test"}
    else None
)

@app.exception_handler(Exception)
async def debug_exception_handler(request: Request, exc: Exception):
    if settings.env in {"local", "test"}:
        return PlainTextResponse(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            status_code=500,
        )
    logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
    return PlainTextResponse("Internal Server Error", status_code=500)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_origin_regex=local_cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(browse_router)
app.include_router(search_router)
app.include_router(titles_router)
app.include_router(wishlist_router)

mcp = FastApiMCP(app)
mcp.mount_http()
