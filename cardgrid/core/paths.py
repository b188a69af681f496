from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional


def get_store_dir(base_dir: Optional[Path] = None) -> Path:
    """Return the directory holding the dashboard store.

    Defaults to `<base_dir or cwd>/.cardgrid`.
    Override with `CARDGRID_STORE_DIR` (absolute path recommended).
    """

    override = (os.environ.get("CARDGRID_STORE_DIR") or "").strip()
    if override:
        p = Path(override)
        return p if p.is_absolute() else (Path.cwd() / p).resolve()
    return (base_dir or Path.cwd()) / ".cardgrid"


def read_json(path: Path) -> dict:
    if not path.exists():
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


def write_json_atomic(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp_path.replace(path)
