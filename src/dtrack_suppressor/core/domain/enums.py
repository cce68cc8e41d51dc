from __future__ import annotations

import re
from enum import Enum
from typing import Optional


def _normalize_label(value: str) -> str:
    return re.sub(r"[\s\-]+", "_", value.strip()).upper()


class _LabeledEnum(Enum):
    """Enum whose members can be parsed from wire names or UI labels."""

    @classmethod
    def from_str(cls, value: Optional[str]):
        """Parse a member from a name or a human label.

        - Names (case-insensitive): NOT_AFFECTED, not_affected
        - Labels: "Not Affected", "not-affected"
        - Empty string or None: None

        Raises:
            ValueError: If the value does not name a member.
        """
        if value is None:
            return None
        s = value.strip()
        if not s:
            return None
        key = _normalize_label(s)
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(m.name for m in cls)
            raise ValueError(f"Unknown {cls.__name__} '{value}'. Expected one of: {choices}") from None

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


class AnalysisState(_LabeledEnum):
    NOT_SET = "NOT_SET"
    EXPLOITABLE = "EXPLOITABLE"
    IN_TRIAGE = "IN_TRIAGE"
    FALSE_POSITIVE = "FALSE_POSITIVE"
    NOT_AFFECTED = "NOT_AFFECTED"
    RESOLVED = "RESOLVED"


class AnalysisJustification(_LabeledEnum):
    CODE_NOT_PRESENT = "CODE_NOT_PRESENT"
    CODE_NOT_REACHABLE = "CODE_NOT_REACHABLE"
    REQUIRES_CONFIGURATION = "REQUIRES_CONFIGURATION"
    REQUIRES_DEPENDENCY = "REQUIRES_DEPENDENCY"
    REQUIRES_ENVIRONMENT = "REQUIRES_ENVIRONMENT"
    PROTECTED_BY_COMPILER = "PROTECTED_BY_COMPILER"
    PROTECTED_AT_RUNTIME = "PROTECTED_AT_RUNTIME"
    PROTECTED_AT_PERIMETER = "PROTECTED_AT_PERIMETER"
    PROTECTED_BY_MITIGATING_CONTROL = "PROTECTED_BY_MITIGATING_CONTROL"


class AnalysisResponse(_LabeledEnum):
    CAN_NOT_FIX = "CAN_NOT_FIX"
    WILL_NOT_FIX = "WILL_NOT_FIX"
    UPDATE = "UPDATE"
    ROLLBACK = "ROLLBACK"
    WORKAROUND_AVAILABLE = "WORKAROUND_AVAILABLE"
