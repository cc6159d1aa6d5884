"""Parsers that fold raw cluster objects into snapshot models."""

from kubelens.controllers.cluster.parsers.node_parser import (
    NodeParser,
    node_address,
    partition_pods_by_node,
)
from kubelens.controllers.cluster.parsers.pod_parser import PodParser, pod_display_status
from kubelens.controllers.cluster.parsers.summary_parser import (
    SummaryInputs,
    SummaryParser,
)

__all__ = [
    "NodeParser",
    "PodParser",
    "SummaryInputs",
    "SummaryParser",
    "node_address",
    "partition_pods_by_node",
    "pod_display_status",
]
