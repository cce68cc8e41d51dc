from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

from asteval import Interpreter

from ..core.domain.errors import FilterError

if TYPE_CHECKING:
    from ..core.domain.models import Project


def filter_projects(projects: Sequence[Project], filter_expr: str) -> list[Project]:
    """Filter projects using asteval expression.

    Available variables in filter expression:
    - uuid: str - Project UUID
    - name: str - Project name
    - version: str | None - Project version
    - active: bool - Whether the project is active

    Examples: 'name.startswith("payments")', 'version == "2.0"', 'active and name != "legacy"'
    """
    aeval = Interpreter()
    filtered = []

    for p in projects:
        ctx = {
            "uuid": p.uuid,
            "name": p.name,
            "version": p.version,
            "active": p.active,
        }
        for key, value in ctx.items():
            aeval.symtable[key] = value

        result = aeval(filter_expr)
        if aeval.error:
            error_msg = aeval.error[0].get_error()
            raise FilterError(f"Filter evaluation error: {error_msg}")
        if result:
            filtered.append(p)

    return filtered
