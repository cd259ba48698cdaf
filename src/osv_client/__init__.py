"""osv_client package: app/core/infra/config.

Expose the OSV.dev client and its request/response records at the package level.
"""

from .app.api import ClientConfig, OsvApiClient
from .config.urls import Server
from .core.domain.models import (
    MAX_BATCH_SIZE,
    BatchQuery,
    BatchResult,
    CommitQuery,
    Package,
    PackageQuery,
    VersionQuery,
    VulnerabilityIdList,
    VulnerabilitySummary,
    by_commit,
    by_version,
)
from .core.domain.vulnerability import Vulnerability
from .core.errors import (
    BatchSizeExceededError,
    OsvClientError,
    OsvDecodeError,
    OsvHttpStatusError,
    OsvTransportError,
)
from .infra.http_client import HttpClient

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "OsvApiClient",
    "ClientConfig",
    "HttpClient",
    "Server",
    "MAX_BATCH_SIZE",
    "Package",
    "CommitQuery",
    "VersionQuery",
    "PackageQuery",
    "by_commit",
    "by_version",
    "BatchQuery",
    "BatchResult",
    "VulnerabilityIdList",
    "VulnerabilitySummary",
    "Vulnerability",
    "OsvClientError",
    "BatchSizeExceededError",
    "OsvTransportError",
    "OsvHttpStatusError",
    "OsvDecodeError",
]
