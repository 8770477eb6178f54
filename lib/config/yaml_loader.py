"""Safe YAML loader."""
from pathlib import Path
from typing import Any, Dict

import yaml


def load_yaml(path: str | Path, missing_ok: bool = False) -> Dict[str, Any]:
    """Return the mapping stored in ``path``.

    An empty document yields ``{}``.  With ``missing_ok`` a file that does
    not exist yields ``{}`` as well, which lets services fall back to their
    built-in defaults.
    """

    p = Path(path)
    if missing_ok and not p.exists():
        return {}
    with p.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{p}: expected a mapping at the top level")
    return data
