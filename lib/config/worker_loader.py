from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from lib.utils.validation import as_int, ensure

from .yaml_loader import load_yaml

DEFAULT_MAX_BODY_BYTES = 1024 * 1024


@dataclass
class CorsConfig:
    allow_origin: str = "*"
    allow_methods: str = "POST, OPTIONS"
    allow_headers: str = "content-type"
    max_age: int = 86400


@dataclass
class WorkerConfig:
    """Typed view over ``worker.yaml``.

    Every key is optional; a missing file or section yields the defaults the
    public worker runs with.  The raw mapping is retained for diagnostics.
    """

    cors: CorsConfig = field(default_factory=CorsConfig)
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    log_level: str = "INFO"
    raw: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ensure(self.cors.max_age >= 0, f"cors.max_age must be >= 0, got {self.cors.max_age}")
        ensure(
            self.max_body_bytes > 0,
            f"limits.max_body_bytes must be > 0, got {self.max_body_bytes}",
        )


def load_worker_config(path: str | Path) -> WorkerConfig:
    """Load ``worker.yaml`` and return a :class:`WorkerConfig`.

    Parameters
    ----------
    path:
        File system path to the YAML configuration file.  A path that does
        not exist is treated as an empty configuration.
    """

    raw = load_yaml(path, missing_ok=True)
    worker = raw.get("worker") or {}
    cors = worker.get("cors") or {}
    limits = worker.get("limits") or {}
    defaults = CorsConfig()
    return WorkerConfig(
        cors=CorsConfig(
            allow_origin=str(cors.get("allow_origin", defaults.allow_origin)),
            allow_methods=str(cors.get("allow_methods", defaults.allow_methods)),
            allow_headers=str(cors.get("allow_headers", defaults.allow_headers)),
            max_age=as_int(cors.get("max_age", defaults.max_age), "cors.max_age"),
        ),
        max_body_bytes=as_int(
            limits.get("max_body_bytes", DEFAULT_MAX_BODY_BYTES), "limits.max_body_bytes"
        ),
        log_level=str((worker.get("logging") or {}).get("level", "INFO")),
        raw=raw,
    )
