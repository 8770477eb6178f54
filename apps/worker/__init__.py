"""Edge worker exposing the TOON codec over HTTP.

:class:`EdgeHandler` maps a request, given as method, path and raw body, to a
:class:`WorkerResponse`.  It never touches the network, so the FastAPI app
in :mod:`apps.worker.main` is only a thin adapter and the behaviour can be
tested without a server.

Routes::

    OPTIONS *        CORS preflight, empty body
    POST /encode     JSON in, TOON text out
    POST /decode     TOON text in, JSON out

Anything else is answered with a JSON error body.  Every response allows any
origin.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from lib.codec.toon import decode, encode
from lib.config.worker_loader import WorkerConfig, load_worker_config
from lib.contracts.errors import ErrorBody, describe
from lib.telemetry.logger import get_logger

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass
class WorkerResponse:
    status: int
    headers: Dict[str, str]
    body: bytes = b""

    def json(self) -> Any:
        return json.loads(self.body)

    def text(self) -> str:
        return self.body.decode("utf-8")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def _parse_json(body: bytes) -> Any:
    # UTF-8 only (a leading BOM is dropped); ``json.loads`` on bytes would
    # also sniff UTF-16 and UTF-32, and accept NaN and Infinity.
    return json.loads(body.decode("utf-8-sig"), parse_constant=_reject_constant)


@dataclass
class EdgeHandler:
    """Stateless request dispatcher for the codec worker."""

    config: WorkerConfig | None = field(default=None)
    config_path: str = "config/worker.yaml"

    def __post_init__(self) -> None:
        if self.config is None:
            self.config = load_worker_config(Path(self.config_path))

    # ------------------------------------------------------------------
    # Response helpers
    # ------------------------------------------------------------------
    def json_response(self, body: Any, status: int = 200) -> WorkerResponse:
        payload = json.dumps(body, ensure_ascii=False, separators=(",", ":"))
        return WorkerResponse(
            status=status,
            headers={
                "content-type": JSON_CONTENT_TYPE,
                "access-control-allow-origin": self.config.cors.allow_origin,
            },
            body=payload.encode("utf-8"),
        )

    def text_response(self, body: str, status: int = 200) -> WorkerResponse:
        return WorkerResponse(
            status=status,
            headers={
                "content-type": TEXT_CONTENT_TYPE,
                "access-control-allow-origin": self.config.cors.allow_origin,
            },
            body=body.encode("utf-8"),
        )

    def error_response(self, status: int, error: str, detail: str | None = None) -> WorkerResponse:
        return self.json_response(ErrorBody(error=error, detail=detail).to_dict(), status)

    def payload_too_large(self) -> WorkerResponse:
        return self.error_response(413, "Payload too large")

    def preflight_response(self) -> WorkerResponse:
        cors = self.config.cors
        return WorkerResponse(
            status=200,
            headers={
                "access-control-allow-origin": cors.allow_origin,
                "access-control-allow-methods": cors.allow_methods,
                "access-control-allow-headers": cors.allow_headers,
                "access-control-max-age": str(cors.max_age),
            },
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def handle(self, method: str, path: str, body: bytes = b"") -> WorkerResponse:
        """Return the response for one request."""

        method = method.upper()
        logger.debug("%s %s (%d bytes)", method, path, len(body))

        if method == "OPTIONS":
            return self.preflight_response()
        if method != "POST":
            return self.error_response(405, "Method not allowed")
        if len(body) > self.config.max_body_bytes:
            logger.warning(
                "rejected %s: body of %d bytes exceeds limit of %d",
                path,
                len(body),
                self.config.max_body_bytes,
            )
            return self.payload_too_large()

        if path == "/encode":
            return self.encode(body)
        if path == "/decode":
            return self.decode(body)
        return self.error_response(404, "Not found")

    def encode(self, body: bytes) -> WorkerResponse:
        try:
            toon = encode(_parse_json(body))
        except Exception as exc:
            logger.warning("encode failed: %s", describe(exc))
            return self.error_response(400, "Invalid JSON or encode failure", describe(exc))
        return self.text_response(toon)

    def decode(self, body: bytes) -> WorkerResponse:
        text = body.decode("utf-8", errors="replace")
        if not text.strip():
            return self.error_response(400, "Empty body")
        try:
            value = decode(text)
            return self.json_response(value)
        except Exception as exc:
            logger.warning("decode failed: %s", describe(exc))
            return self.error_response(400, "Decode failure", describe(exc))


__all__ = ["EdgeHandler", "WorkerResponse"]
