"""Static host for the exported web front-end.

The front-end is built ahead of time into a plain directory of HTML and
assets (see ``config/site.yaml``).  :class:`SiteHost` only serves that
directory; it never builds or renders anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from starlette.responses import FileResponse
from starlette.staticfiles import StaticFiles

from lib.config.site_loader import SiteConfig, load_site_config
from lib.telemetry.logger import get_logger

logger = get_logger(__name__)


class ExportFiles(StaticFiles):
    """``StaticFiles`` over the pages directory plus a separate assets one.

    Unknown paths are answered with ``fallback`` when it is configured,
    which is how single-page exports resolve client-side routes.
    """

    def __init__(self, pages: Path, assets: Path, fallback: str | None = None) -> None:
        super().__init__(directory=pages, html=True)
        if assets.resolve() != pages.resolve():
            self.all_directories.append(assets)
        self.fallback = pages / fallback if fallback else None

    async def get_response(self, path, scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404 or self.fallback is None or not self.fallback.is_file():
                raise
            return FileResponse(self.fallback)


@dataclass
class SiteHost:
    config: SiteConfig | None = field(default=None)
    config_path: str = "config/site.yaml"
    root: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        if self.config is None:
            self.config = load_site_config(self.root / self.config_path)

    @property
    def pages_dir(self) -> Path:
        return self.root / self.config.pages

    @property
    def assets_dir(self) -> Path:
        return self.root / self.config.assets

    def build_app(self) -> FastAPI:
        app = FastAPI(title="toon-site", docs_url=None, redoc_url=None, openapi_url=None)
        if not self.pages_dir.is_dir():
            # Nothing exported yet; every request falls through to 404.
            logger.warning("static export directory %s does not exist", self.pages_dir)
            return app
        files = ExportFiles(self.pages_dir, self.assets_dir, self.config.fallback)
        app.mount(self.config.base or "/", files, name="site")
        logger.info("serving %s at %s", self.pages_dir, self.config.base or "/")
        return app


__all__ = ["ExportFiles", "SiteHost"]
