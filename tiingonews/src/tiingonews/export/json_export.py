import json
from pathlib import Path
from typing import Any, List

from ..models.news import NewsRecord

def records_to_dicts(records: List[NewsRecord]) -> List[dict]:
    return [r.model_dump(mode="json") for r in records]

def export_json(data: Any, path: Path):
    """
    Export data to JSON file.
    """
    with open(path, 'w') as f:
        json.dump(data, f, indent=2, sort_keys=True, default=str)
