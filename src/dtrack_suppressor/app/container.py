from __future__ import annotations

import logging

from dependency_injector import containers, providers

from ..config.settings import AppConfig
from ..config.tokens import mask_token
from ..core.usecases.bulk_suppress import BulkSuppressUseCase
from ..core.usecases.list_affected_projects import ListAffectedProjectsUseCase
from ..core.usecases.suppress_vulnerability import SuppressVulnerabilityUseCase
from ..infra.dtrack_adapter import DependencyTrackAdapter
from ..infra.http_client import HttpClient
from ..infra.rate_limiter import SimpleRateLimiter

logger = logging.getLogger(__name__)


def http_client_resource(api_url, api_key, timeout_seconds, requests_per_second):
	"""Create the HTTP client for the Dependency-Track API as a resource with proper cleanup."""
	logger.info(f"Initializing Dependency-Track client for {api_url}")

	if api_key:
		logger.info(f"API token found: {mask_token(api_key)} (length: {len(api_key)})")
	else:
		logger.warning("No API token configured - requests will fail with MissingCredential")

	rate_limiter = None
	if requests_per_second:
		logger.debug(f"Throttling requests to {requests_per_second}/s")
		rate_limiter = SimpleRateLimiter(requests_per_second)

	client = HttpClient(base_url=api_url, timeout_seconds=timeout_seconds, rate_limiter=rate_limiter)
	try:
		yield client
	finally:
		logger.debug("Closing Dependency-Track client")
		client.close()


class Container(containers.DeclarativeContainer):
	config = providers.Configuration(pydantic_settings=[AppConfig()])

	http_client = providers.Resource(
		http_client_resource,
		api_url=config.api_url,
		api_key=config.api_key,
		timeout_seconds=config.timeout_seconds,
		requests_per_second=config.requests_per_second,
	)

	store = providers.Singleton(DependencyTrackAdapter, http_client=http_client, api_key=config.api_key)

	list_projects_uc = providers.Factory(ListAffectedProjectsUseCase, store=store)
	suppress_uc = providers.Factory(SuppressVulnerabilityUseCase, store=store)
	bulk_suppress_uc = providers.Factory(
		BulkSuppressUseCase,
		store=store,
		list_projects=list_projects_uc,
		suppress=suppress_uc,
	)
