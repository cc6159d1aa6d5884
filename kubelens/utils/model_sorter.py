"""Stable, field-selectable ordering of node and pod snapshots."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from kubelens.constants.enums import NodeSortField, PodSortField
from kubelens.models.core.node_model import NodeModel
from kubelens.models.core.pod_model import PodModel

logger = logging.getLogger(__name__)


def _age_key(model: NodeModel | PodModel) -> float:
    # Youngest first; an unknown creation time sorts as the oldest.
    if model.created_at is None:
        return float("inf")
    return -model.created_at.timestamp()


_NODE_KEYS: dict[NodeSortField, Callable[[NodeModel], Any]] = {
    NodeSortField.NAME: lambda n: n.name,
    NodeSortField.STATUS: lambda n: n.status,
    NodeSortField.AGE: _age_key,
    NodeSortField.CPU: lambda n: n.cpu_usage_ratio,
    NodeSortField.MEMORY: lambda n: n.memory_usage_ratio,
    NodeSortField.PODS: lambda n: n.pods_count,
}

_POD_KEYS: dict[PodSortField, Callable[[PodModel], Any]] = {
    PodSortField.NAMESPACE: lambda p: p.identity,
    PodSortField.NAME: lambda p: p.name,
    PodSortField.NODE: lambda p: p.node,
    PodSortField.STATUS: lambda p: p.status,
    PodSortField.RESTARTS: lambda p: p.restarts,
    PodSortField.AGE: _age_key,
    PodSortField.CPU: lambda p: p.usage_cpu_mcores,
    PodSortField.MEMORY: lambda p: p.usage_memory_bytes,
}


def _coerce_field(field: Any, enum_cls: type) -> Any:
    if isinstance(field, enum_cls):
        return field
    if isinstance(field, str):
        try:
            return enum_cls(field.lower())
        except ValueError:
            logger.debug("Unknown sort field %r, using canonical order", field)
    return None


def sort_nodes(
    models: list[NodeModel],
    field: NodeSortField | str | None = None,
    *,
    descending: bool = False,
) -> list[NodeModel]:
    """Sort nodes in place by ``field``; unknown fields order by name.

    The sort is stable, so equal keys keep their relative order between
    refreshes. Returns the same list for chaining.
    """
    sort_field = _coerce_field(field, NodeSortField)
    if sort_field is None:
        models.sort(key=lambda n: n.name)
        return models
    models.sort(key=_NODE_KEYS[sort_field], reverse=descending)
    return models


def sort_pods(
    models: list[PodModel],
    field: PodSortField | str | None = None,
    *,
    descending: bool = False,
) -> list[PodModel]:
    """Sort pods in place by ``field``; unknown fields order by namespace, name.

    The sort is stable, so equal keys keep their relative order between
    refreshes. Returns the same list for chaining.
    """
    sort_field = _coerce_field(field, PodSortField)
    if sort_field is None:
        models.sort(key=lambda p: p.identity)
        return models
    models.sort(key=_POD_KEYS[sort_field], reverse=descending)
    return models
