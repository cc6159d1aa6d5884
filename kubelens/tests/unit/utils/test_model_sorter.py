"""Tests for node and pod ordering."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from kubelens.constants.enums import NodeSortField, PodSortField
from kubelens.models.core.node_model import NodeModel
from kubelens.models.core.pod_model import PodModel
from kubelens.models.state.app_settings import AppSettings
from kubelens.utils.model_sorter import sort_nodes, sort_pods


def _pod(namespace: str, name: str, **kwargs) -> PodModel:
    return PodModel(namespace=namespace, name=name, **kwargs)


@pytest.mark.unit
@pytest.mark.fast
class TestSortNodes:
    """Tests for sort_nodes."""

    def test_default_orders_by_name(self) -> None:
        """No field means canonical name order."""
        nodes = [NodeModel(name="c"), NodeModel(name="a"), NodeModel(name="b")]
        sort_nodes(nodes)
        assert [n.name for n in nodes] == ["a", "b", "c"]

    def test_unknown_field_falls_back_to_name(self) -> None:
        """An unrecognized field string orders by name."""
        nodes = [NodeModel(name="b"), NodeModel(name="a")]
        sort_nodes(nodes, "bogus")
        assert [n.name for n in nodes] == ["a", "b"]

    def test_cpu_ratio_descending(self) -> None:
        """CPU sort uses the usage ratio."""
        nodes = [
            NodeModel(name="low", usage_cpu_mcores=100, allocatable_cpu_mcores=1000),
            NodeModel(name="high", usage_cpu_mcores=900, allocatable_cpu_mcores=1000),
        ]
        sort_nodes(nodes, NodeSortField.CPU, descending=True)
        assert [n.name for n in nodes] == ["high", "low"]

    def test_accepts_string_field(self) -> None:
        """Fields may be given by their string value."""
        nodes = [NodeModel(name="a", pods_count=5), NodeModel(name="b", pods_count=1)]
        sort_nodes(nodes, "pods")
        assert [n.name for n in nodes] == ["b", "a"]

    def test_sorts_in_place_and_returns_list(self) -> None:
        """The input list itself is reordered."""
        nodes = [NodeModel(name="b"), NodeModel(name="a")]
        assert sort_nodes(nodes) is nodes


@pytest.mark.unit
@pytest.mark.fast
class TestSortPods:
    """Tests for sort_pods."""

    def test_default_orders_by_namespace_then_name(self) -> None:
        """Canonical pod order is (namespace, name)."""
        pods = [_pod("b", "x"), _pod("a", "z"), _pod("a", "y")]
        sort_pods(pods)
        assert [p.identity for p in pods] == [("a", "y"), ("a", "z"), ("b", "x")]

    def test_default_field_orders_names_within_namespace(self) -> None:
        """The default namespace field orders pods by name inside a namespace."""
        pods = [_pod("shop", "web"), _pod("shop", "api"), _pod("default", "zz")]
        sort_pods(pods, AppSettings().pod_sort_field)
        assert [p.identity for p in pods] == [
            ("default", "zz"),
            ("shop", "api"),
            ("shop", "web"),
        ]

    def test_stable_for_equal_keys(self) -> None:
        """Ties keep their original relative order."""
        pods = [
            _pod("ns-b", "web", restarts=1),
            _pod("ns-a", "web", restarts=1),
            _pod("ns-c", "db", restarts=0),
        ]
        sort_pods(pods, PodSortField.RESTARTS)
        assert [p.identity for p in pods] == [
            ("ns-c", "db"),
            ("ns-b", "web"),
            ("ns-a", "web"),
        ]

    def test_stable_for_equal_keys_descending(self) -> None:
        """Descending order is stable as well."""
        pods = [_pod("ns-b", "web", restarts=1), _pod("ns-a", "web", restarts=1)]
        sort_pods(pods, PodSortField.RESTARTS, descending=True)
        assert [p.namespace for p in pods] == ["ns-b", "ns-a"]

    def test_age_youngest_first_unknown_last(self) -> None:
        """Age sort lists the newest pod first and unknown ages last."""
        pods = [
            _pod("ns", "unknown"),
            _pod("ns", "old", created_at=datetime(2023, 1, 1, tzinfo=timezone.utc)),
            _pod("ns", "new", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        ]
        sort_pods(pods, PodSortField.AGE)
        assert [p.name for p in pods] == ["new", "old", "unknown"]

    def test_memory_usage(self) -> None:
        """Memory sort uses the usage figure."""
        pods = [_pod("ns", "big", usage_memory_bytes=10), _pod("ns", "small", usage_memory_bytes=1)]
        sort_pods(pods, "memory")
        assert [p.name for p in pods] == ["small", "big"]
