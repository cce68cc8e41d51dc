from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Sequence

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from .container import Container
from ..config.overrides import load_overrides
from ..config.settings import AppConfig
from ..core.domain.enums import AnalysisJustification, AnalysisResponse, AnalysisState
from ..core.domain.errors import FilterError, MissingCredential, SuppressorError
from ..core.domain.models import AnalysisConfig, Project, SuppressionResult
from ..core.services.config_resolver import GlobalAnalysisConfig


app = typer.Typer(add_completion=False, help="Bulk-apply a Dependency-Track analysis to every instance of a vulnerability")


class LogLevel(str, Enum):
    OFF = "OFF"
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


@contextmanager
def provide_container() -> Iterator[Container]:
    container = Container()
    # re-read environment and .env at call time
    container.config.from_pydantic(AppConfig())
    container.init_resources()
    try:
        yield container
    finally:
        container.shutdown_resources()


@app.callback()
def main(
    log_level: Annotated[
        Optional[LogLevel],
        typer.Option("--log-level", help="Set log level (OFF, CRITICAL, ERROR, WARNING, INFO, DEBUG). Default: OFF"),
    ] = None,
) -> None:
    """Configure the package logger when a log level is given."""
    if log_level in (None, LogLevel.OFF):
        return

    level = logging.getLevelName(log_level.value)
    package_name = __package__.split(".", 1)[0] if __package__ else "dtrack_suppressor"
    logger = logging.getLogger(package_name)

    has_stream = any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    if not has_stream:
        handler = logging.StreamHandler()  # stderr
        handler.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
        logger.addHandler(handler)

    logger.propagate = False
    logger.setLevel(level)


def _fail(message: str, code: int = 1) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=code)


def _parse_enum(enum_cls, value: Optional[str], option: str):
    try:
        return enum_cls.from_str(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=option) from None


@app.command("projects", help="List projects affected by a vulnerability (UUID, name, version, active).")
def projects_cmd(
    source: str = typer.Argument(..., help="Vulnerability source (e.g., NVD, GITHUB, OSV)"),
    vuln_id: str = typer.Argument(..., help="Vulnerability identifier (e.g., CVE-2024-0001)"),
    include_inactive: bool = typer.Option(False, "--include-inactive", help="Also list inactive projects"),
    filter: Optional[str] = typer.Option(None, "--filter", "-f", help="Filter expression (e.g., 'name == \"shop\"', 'version != \"1.0\"')"),
) -> None:
    with provide_container() as container:
        uc = container.list_projects_uc()
        try:
            projects = uc.execute(source, vuln_id, include_inactive=include_inactive, filter_expr=filter)
        except MissingCredential as e:
            raise _fail(f"Error: {e}", code=2)
        except FilterError as e:
            raise _fail(f"Filter error: {e}")
        except SuppressorError as e:
            raise _fail(f"Error: {e}")
    if not projects:
        typer.echo("No projects found for this vulnerability")
        return
    _print_projects(projects)


@app.command("suppress", help=(
    "Apply one analysis to every component affected by the vulnerability in every selected project. "
    "Global options are applied to all projects first; entries from --overrides win over them."
))
def suppress_cmd(
    source: str = typer.Argument(..., help="Vulnerability source (e.g., NVD, GITHUB, OSV)"),
    vuln_id: str = typer.Argument(..., help="Vulnerability identifier (e.g., CVE-2024-0001)"),
    state: Optional[str] = typer.Option(None, "--state", help="Analysis state (e.g., FALSE_POSITIVE, NOT_AFFECTED). Default: FALSE_POSITIVE"),
    justification: Optional[str] = typer.Option(None, "--justification", help="Justification; only applied where the state is NOT_AFFECTED"),
    response: Optional[str] = typer.Option(None, "--response", help="Vendor response (e.g., WILL_NOT_FIX)"),
    details: Optional[str] = typer.Option(None, "--details", help="Analysis details text"),
    comment: Optional[str] = typer.Option(None, "--comment", help="Audit comment"),
    suppressed: Optional[bool] = typer.Option(None, "--suppress/--no-suppress", help="Suppressed flag. Default: suppress"),
    overrides: Optional[Path] = typer.Option(None, "--overrides", exists=True, dir_okay=False, help="JSON file of per-project edits keyed by project UUID or name"),
    include_inactive: bool = typer.Option(False, "--include-inactive", help="Also process inactive projects"),
    filter: Optional[str] = typer.Option(None, "--filter", "-f", help="Project filter expression"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    global_config = GlobalAnalysisConfig(
        suppressed=suppressed,
        analysis_state=_parse_enum(AnalysisState, state, "--state"),
        analysis_justification=_parse_enum(AnalysisJustification, justification, "--justification"),
        analysis_response=_parse_enum(AnalysisResponse, response, "--response"),
        analysis_details=details,
        comment=comment,
    )
    effective_state = global_config.analysis_state or AnalysisConfig().analysis_state
    if global_config.analysis_justification and effective_state is not AnalysisState.NOT_AFFECTED:
        typer.echo(
            f"Warning: --justification is ignored because the state is {effective_state.value}; "
            "pass --state NOT_AFFECTED to apply it",
            err=True,
        )

    row_overrides = None
    if overrides is not None:
        try:
            row_overrides = load_overrides(overrides)
        except (ValidationError, ValueError) as e:
            raise _fail(f"Overrides error: {e}")

    with provide_container() as container:
        uc = container.bulk_suppress_uc()
        try:
            result = uc.execute(
                source,
                vuln_id,
                global_config=global_config,
                row_overrides=row_overrides,
                include_inactive=include_inactive,
                filter_expr=filter,
            )
        except MissingCredential as e:
            raise _fail(f"Error: {e}", code=2)
        except FilterError as e:
            raise _fail(f"Filter error: {e}")
        except SuppressorError as e:
            raise _fail(f"Error: {e}")

    if as_json:
        typer.echo(json.dumps(_result_to_dict(source, vuln_id, result), indent=2))
    else:
        _print_result(vuln_id, result)
    if not result.ok:
        raise typer.Exit(code=1)


def _print_projects(projects: Sequence[Project]) -> None:
    print(f"{'UUID':36} {'Name':30} {'Version':15} {'Active':6}")
    for p in projects:
        print(f"{p.uuid:36} {p.name:30} {p.version or '-':15} {'yes' if p.active else 'no':6}")


def _result_to_dict(source: str, vuln_id: str, result: SuppressionResult) -> dict:
    return {
        "vulnerability": {"source": source, "vulnId": vuln_id},
        "successCount": result.success_count,
        "failureCount": result.failure_count,
        "failures": [
            {
                "project": f.project.uuid,
                "projectName": f.project.display_name,
                "component": f.component_uuid,
                "status": f.status,
                "error": f.error,
            }
            for f in result.failures
        ],
        "noopProjects": [p.uuid for p in result.noop_projects],
    }


def _print_result(vuln_id: str, result: SuppressionResult) -> None:
    if result.attempted == 0 and not result.noop_projects:
        typer.echo("No projects found for this vulnerability")
        return
    if result.success_count > 0:
        typer.echo(f"Successfully processed {vuln_id} in {result.success_count} instance(s)")
    for p in result.noop_projects:
        typer.echo(f"No findings for {vuln_id} in project {p.display_name}")
    if result.failures:
        typer.echo(f"Failed to process {result.failure_count} instance(s)", err=True)
        for f in result.failures:
            component = f.component_uuid or "(findings)"
            typer.echo(f"  - {f.project.display_name} [{f.project.uuid}] {component}: {f.error}", err=True)


if __name__ == "__main__":  # pragma: no cover
    app()
