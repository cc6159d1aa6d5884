"""Fetchers for the cluster data sources."""

from kubelens.controllers.cluster.fetchers.authz_fetcher import (
    Authorizer,
    KubectlAuthorizer,
)
from kubelens.controllers.cluster.fetchers.metrics_fetcher import (
    KubectlMetricsAccessor,
    MetricsAccessor,
)
from kubelens.controllers.cluster.fetchers.object_fetcher import (
    KubectlObjectCache,
    ObjectCache,
    RawObject,
)

__all__ = [
    "Authorizer",
    "KubectlAuthorizer",
    "KubectlMetricsAccessor",
    "KubectlObjectCache",
    "MetricsAccessor",
    "ObjectCache",
    "RawObject",
]
