"""Core snapshot models."""

from kubelens.models.core.cluster_summary import ClusterSummary, ReadyTally
from kubelens.models.core.node_model import NodeModel, ResourceUsage
from kubelens.models.core.pod_model import PodModel

__all__ = [
    "ClusterSummary",
    "NodeModel",
    "PodModel",
    "ReadyTally",
    "ResourceUsage",
]
