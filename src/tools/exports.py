"""
src/tools/exports.py: export a run's audit trail as JSON or CSV.

Provides:
- export_json(obj, path): write JSON to file
- export_run_json(result, path): full RunResult (messages + tool records)
- export_tool_records_csv(records, path): one row per tool invocation

Notes:
- JSON export keeps full fidelity; CSV flattens arguments/output to JSON strings.
"""


import csv
import json
from typing import Any, List, Sequence

from orchestrator.models import RunResult, ToolInvocationRecord


CSV_HEADERS: List[str] = ["name", "tool_call_id", "success", "arguments", "output", "error"]


# --- JSON ----------------------------------------------------------------------
def export_json(obj: Any, path: str) -> str:
    """
    Export any serialisable object as JSON.

    Args:
        obj: Python dict/list/primitive
        path: file path for saving

    Returns: path
    """

    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False, default=str)

    return path


def export_run_json(result: RunResult, path: str) -> str:

    return export_json(result.model_dump(mode="json"), path)


# --- CSV -----------------------------------------------------------------------
def export_tool_records_csv(records: Sequence[ToolInvocationRecord], path: str) -> str:
    """
    Export tool invocation records to CSV, in invocation order.

    Args:
        records: e.g., RunResult.tool_results
        path: file path for saving

    Returns: path
    """

    if not records:
        raise ValueError("No records to export.")

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_HEADERS)
        writer.writeheader()
        for r in records:
            writer.writerow({
                "name": r.name,
                "tool_call_id": r.tool_call_id or "",
                "success": r.success,
                "arguments": json.dumps(r.arguments, ensure_ascii=False, default=str),
                "output": json.dumps(r.output, ensure_ascii=False, default=str) if r.success else "",
                "error": r.error or "",
            })

    return path
