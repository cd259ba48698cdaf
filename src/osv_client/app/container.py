from __future__ import annotations

import logging

from dependency_injector import containers, providers

from ..config.settings import ClientConfig
from ..config.urls import resolve_base_url
from ..core.usecases.fetch_vulnerabilities import FetchVulnerabilitiesUseCase
from ..infra.http_client import HttpClient
from ..infra.osv_api import OsvApiAdapter

logger = logging.getLogger(__name__)


def http_client_resource(
	max_concurrency,
	max_concurrency_per_host,
	timeout_seconds,
	max_redirects,
	user_agent,
):
	"""Default transport as a resource: whoever initialises it shuts it down."""
	logger.info(
		f"Initializing HTTP client (max_concurrency={max_concurrency}, "
		f"per_host={max_concurrency_per_host or max_concurrency}, timeout={timeout_seconds}s)"
	)
	headers = {"User-Agent": user_agent} if user_agent else None
	client = HttpClient(
		base_headers=headers,
		timeout_seconds=timeout_seconds,
		max_concurrency=max_concurrency,
		max_concurrency_per_host=max_concurrency_per_host,
		max_redirects=max_redirects,
	)
	try:
		yield client
	finally:
		logger.debug("Closing HTTP client")
		client.close()


class Container(containers.DeclarativeContainer):
	config = providers.Configuration(pydantic_settings=[ClientConfig()])

	base_url = providers.Callable(resolve_base_url, server=config.server, base_url=config.base_url)

	http_client = providers.Resource(
		http_client_resource,
		max_concurrency=config.max_concurrency,
		max_concurrency_per_host=config.max_concurrency_per_host,
		timeout_seconds=config.timeout_seconds,
		max_redirects=config.max_redirects,
		user_agent=config.user_agent,
	)

	osv_api = providers.Singleton(OsvApiAdapter, http_client=http_client, base_url=base_url)

	fetch_vulnerabilities_uc = providers.Factory(FetchVulnerabilitiesUseCase, api=osv_api)
