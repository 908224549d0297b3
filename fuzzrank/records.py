import json
from pathlib import Path
from typing import Any


class RecordFileError(ValueError):
    pass


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array of record objects from disk."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise RecordFileError(f"Cannot read {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise RecordFileError(f"{path} is not valid JSON: {e.msg} (line {e.lineno})") from e

    if not isinstance(data, list):
        raise RecordFileError(f"{path} must contain a JSON array of records")
    bad = [i for i, item in enumerate(data) if not isinstance(item, dict)]
    if bad:
        raise RecordFileError(f"{path}: entries must be objects (first bad index: {bad[0]})")
    return data
