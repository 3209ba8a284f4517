from __future__ import annotations

from pathlib import Path
from typing import Any

from jvmlens.json_codec import dumps_bytes


def export_json_report(payload: Any, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_bytes(payload, pretty=True))
    return path
