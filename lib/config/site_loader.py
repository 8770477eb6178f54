from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from lib.utils.validation import ensure

from .yaml_loader import load_yaml


@dataclass
class SiteConfig:
    """Static export settings of the web front-end.

    ``pages`` holds the exported HTML, ``assets`` the static files (usually
    the same directory).  ``fallback`` names a page served for unknown
    paths, ``base`` the URL prefix the site is mounted under.
    """

    pages: str = "build"
    assets: str = "build"
    fallback: Optional[str] = None
    base: str = ""
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        ensure(
            self.base == "" or (self.base.startswith("/") and not self.base.endswith("/")),
            f"base must be empty or start with '/' and not end with '/', got {self.base!r}",
        )


def load_site_config(path: str | Path) -> SiteConfig:
    """Load ``site.yaml``; a missing file gives the default static export."""

    site = load_yaml(path, missing_ok=True).get("site") or {}
    fallback = site.get("fallback")
    return SiteConfig(
        pages=str(site.get("pages", "build")),
        assets=str(site.get("assets", site.get("pages", "build"))),
        fallback=str(fallback) if fallback else None,
        base=str(site.get("base") or ""),
        log_level=str((site.get("logging") or {}).get("level", "INFO")),
    )
