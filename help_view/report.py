# help_view/report.py

"""
JSON report of a viewing session.

Serializes the summary returned by :func:`help_view.viewer.load_page`.
"""
import json
from pathlib import Path
from typing import Any, Dict


def render_json(summary: Dict[str, Any], output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *summary* as JSON at *output_path*.

    :param summary: session summary (url, resources, status texts, failures)
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from help_view.report import render_json
    report_path = render_json(summary, 'reports/session.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(summary, f, ensure_ascii=False, indent=2 if pretty else None)

    return output


__all__ = ["render_json"]
