"""Decoding the unsupported modules script output."""

import json

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import ReportError
from .models import OBSOLETE_RECOMMENDATION, UnsupportedModule


class UnsupportedModuleRow(BaseModel):
    """One row as printed by the reporting script."""

    project_name: str
    current_version: str
    recommended_version: str | None = None


_rows_adapter = TypeAdapter(list[UnsupportedModuleRow])


def parse_unsupported_modules(output: str) -> list[UnsupportedModule]:
    """Decode the JSON printed by the unsupported modules script.

    Args:
        output: Script stdout; a JSON array, or an object keyed by project

    Returns:
        Modules found, without environment information

    Raises:
        ReportError: If the output is not the expected JSON
    """
    text = output.strip()
    if not text:
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ReportError(f"Unsupported modules script returned invalid JSON: {e}") from e

    if isinstance(data, dict):
        data = list(data.values())

    try:
        rows = _rows_adapter.validate_python(data)
    except ValidationError as e:
        raise ReportError(f"Unexpected unsupported modules data: {e}") from e

    modules = []
    for row in rows:
        recommended = row.recommended_version
        if recommended == OBSOLETE_RECOMMENDATION:
            recommended = None
        modules.append(
            UnsupportedModule(
                name=row.project_name,
                current_version=row.current_version,
                recommended_version=recommended,
            )
        )
    return modules
