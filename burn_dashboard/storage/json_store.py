"""
Flat-file persistence for burn.json and price.json.

Writes go to a sibling <name>.tmp and are moved over the target with
os.replace, so a reader never sees a half-written file.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from burn_dashboard.burn_logging import get_logger

logger = get_logger(__name__)

BURN_FILENAME = "burn.json"
PRICE_FILENAME = "price.json"


def write_json_atomic(path: Path, payload: dict[str, Any]) -> Path:
    """Write payload as indented JSON to path via temp file + rename. Creates parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
        f.write("\n")
    os.replace(tmp_path, path)
    return path


def read_json(path: Path) -> dict[str, Any] | None:
    """Parsed JSON object at path; None if missing, empty, invalid, or not an object."""
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("json_read_failed", path=str(path), error=str(e))
        return None
    if not text.strip():
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("json_invalid", path=str(path), error=str(e))
        return None
    return data if isinstance(data, dict) else None
