from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence

from .app.container import Container
from .config.settings import AppConfig
from .core.domain.models import Project, SuppressionResult
from .core.services.config_resolver import GlobalAnalysisConfig


@contextmanager
def _provide_container(config_override: AppConfig | None = None) -> Iterator[Container]:
    """Create and initialize a DI container.

    Args:
        config_override: Optional AppConfig to override default configuration.
                        If None, configuration is loaded from environment variables
                        and .env file using Pydantic BaseSettings.
    """
    container = Container()
    container.config.from_pydantic(config_override or AppConfig())
    container.init_resources()
    try:
        yield container
    finally:
        container.shutdown_resources()


def list_affected_projects(
    source: str,
    vuln_id: str,
    *,
    include_inactive: bool = False,
    filter_expr: str | None = None,
    config: AppConfig | None = None,
    api_key: str | None = None,
) -> Sequence[Project]:
    """Return projects affected by a vulnerability.

    Args:
        source: Vulnerability source (e.g., NVD, GITHUB, OSV).
        vuln_id: Identifier within the source (e.g., CVE-2024-0001).
        include_inactive: Also return inactive projects.
        filter_expr: Filter expression using Python syntax over uuid, name, version, active.
        config: Optional AppConfig to override default configuration. Takes precedence over api_key.
        api_key: Optional bearer token. Ignored if config is provided.

    Raises:
        MissingCredential: If no token is configured.
        FilterError: If filter_expr is invalid (a ValueError).
    """
    # Allow quick token override without creating full AppConfig
    if api_key and not config:
        config = AppConfig(api_key=api_key)

    with _provide_container(config) as container:
        uc = container.list_projects_uc()
        return uc.execute(source, vuln_id, include_inactive=include_inactive, filter_expr=filter_expr)


def suppress(
    source: str,
    vuln_id: str,
    *,
    global_config: GlobalAnalysisConfig | None = None,
    row_overrides: Mapping[str, Mapping[str, Any]] | None = None,
    include_inactive: bool = False,
    filter_expr: str | None = None,
    config: AppConfig | None = None,
    api_key: str | None = None,
) -> SuppressionResult:
    """Apply an analysis to every project and component affected by a vulnerability.

    Args:
        source: Vulnerability source (e.g., NVD).
        vuln_id: Identifier within the source.
        global_config: Values applied to all projects. Fields left as None keep the per-project value.
        row_overrides: Per-project edits keyed by project UUID or name; they win over global_config.
        include_inactive: Also process inactive projects.
        filter_expr: Project filter expression.
        config: Optional AppConfig to override default configuration. Takes precedence over api_key.
        api_key: Optional bearer token. Ignored if config is provided.

    Returns:
        SuppressionResult. Partial success is reported, not raised.

    Raises:
        MissingCredential: If no token is configured.
        NotFound: If the vulnerability cannot be resolved.
    """
    # Allow quick token override without creating full AppConfig
    if api_key and not config:
        config = AppConfig(api_key=api_key)

    with _provide_container(config) as container:
        uc = container.bulk_suppress_uc()
        return uc.execute(
            source,
            vuln_id,
            global_config=global_config,
            row_overrides=row_overrides,
            include_inactive=include_inactive,
            filter_expr=filter_expr,
        )


__all__ = [
    "AppConfig",
    "GlobalAnalysisConfig",
    "list_affected_projects",
    "suppress",
]
