from __future__ import annotations

from typing import Optional

from ..core.enums import OvertimeDecision
from ..core.exceptions import ValidationError


def optional_id(value, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    text = str(value).strip()
    return text or None


def require_mutually_exclusive(**values) -> None:
    given = [name for name, value in values.items() if value]
    if len(given) > 1:
        raise ValidationError(f"Provide either {' or '.join(values)}, not both")


def parse_decision(value: str) -> OvertimeDecision:
    try:
        return OvertimeDecision(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("Decision must be APPROVE or DENY")
