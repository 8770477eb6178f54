"""HTTP entry point for the codec worker.

Every method and path is routed to :class:`apps.worker.EdgeHandler`, which
decides between preflight, method errors, the two codec routes and 404.
"""

import os

from fastapi import FastAPI, Request, Response

from apps.worker import EdgeHandler, WorkerResponse
from lib.config.worker_loader import load_worker_config
from lib.telemetry.logger import configure_logging

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

config = load_worker_config(os.getenv("TOON_WORKER_CONFIG", "config/worker.yaml"))
configure_logging(config.log_level)

handler = EdgeHandler(config)
app = FastAPI(title="toon-worker", docs_url=None, redoc_url=None, openapi_url=None)


def declared_length(request: Request) -> int | None:
    try:
        return int(request.headers["content-length"])
    except (KeyError, ValueError):
        return None


async def read_limited(request: Request, limit: int) -> bytes:
    """Read at most ``limit + 1`` bytes of the body.

    One byte past the limit is enough for the handler to answer 413; the
    rest of the stream is never buffered.
    """

    buf = bytearray()
    async for chunk in request.stream():
        buf.extend(chunk)
        if len(buf) > limit:
            del buf[limit + 1 :]
            break
    return bytes(buf)


def to_response(result: WorkerResponse) -> Response:
    return Response(content=result.body, status_code=result.status, headers=result.headers)


@app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def dispatch(request: Request) -> Response:
    """Hand the raw request to the edge handler."""

    limit = handler.config.max_body_bytes
    length = declared_length(request)
    if request.method == "POST" and length is not None and length > limit:
        return to_response(handler.payload_too_large())

    body = await read_limited(request, limit)
    return to_response(handler.handle(request.method, request.url.path, body))
