"""JSON export of analysis records.

Renderers (PDF, dashboards) consume this JSON; the field names come from
``AnalysisRecord.to_dict``.
"""

import json
import os
from typing import Any, Dict, Optional

from ..models import AnalysisRecord


def generate_json_report(record: AnalysisRecord, output_path: Optional[str] = None) -> str:
    """Serialize ``record`` to indented JSON, writing it to ``output_path`` if given."""
    json_content = json.dumps(record.to_dict(), indent=2, ensure_ascii=False)

    if output_path:
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(json_content)

    return json_content


def load_json_report(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)
