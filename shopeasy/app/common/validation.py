from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from shopeasy.app.common.errors import ValidationError


def missing_fields(data: Mapping[str, Any], fields: Iterable[str]) -> List[str]:
    """Names of the fields that are absent or blank after stripping."""
    return [f for f in fields if not str(data.get(f) or "").strip()]


def require_fields(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    missing = missing_fields(data, fields)
    if missing:
        raise ValidationError(missing)
