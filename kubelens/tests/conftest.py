"""Shared fixtures: builders for raw Kubernetes objects."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

RawObject = dict[str, Any]


def build_node(
    name: str,
    *,
    ready: str = "True",
    cpu: str = "4",
    memory: str = "16Gi",
    storage: str = "100Gi",
    internal_ip: str | None = "10.0.0.1",
    external_ip: str | None = None,
    hostname: str | None = None,
    runtime: str = "containerd://1.7.2",
    labels: dict[str, str] | None = None,
    created: str = "2024-01-01T00:00:00Z",
    pressures: tuple[str, ...] = (),
    unschedulable: bool = False,
    images: int = 0,
) -> RawObject:
    addresses = []
    if internal_ip is not None:
        addresses.append({"type": "InternalIP", "address": internal_ip})
    if external_ip is not None:
        addresses.append({"type": "ExternalIP", "address": external_ip})
    if hostname is not None:
        addresses.append({"type": "Hostname", "address": hostname})
    conditions = [{"type": "Ready", "status": ready}]
    conditions.extend({"type": p, "status": "True"} for p in pressures)
    return {
        "metadata": {
            "name": name,
            "labels": labels or {},
            "creationTimestamp": created,
        },
        "spec": {"unschedulable": unschedulable},
        "status": {
            "conditions": conditions,
            "addresses": addresses,
            "allocatable": {
                "cpu": cpu,
                "memory": memory,
                "ephemeral-storage": storage,
            },
            "nodeInfo": {
                "kubeletVersion": "v1.29.1",
                "containerRuntimeVersion": runtime,
                "osImage": "Ubuntu 22.04",
                "architecture": "amd64",
            },
            "images": [{"names": [f"img-{i}"]} for i in range(images)],
        },
    }


def build_pod(
    name: str,
    *,
    namespace: str = "default",
    node: str | None = "worker-1",
    phase: str = "Running",
    cpu: str | None = "250m",
    memory: str | None = "256Mi",
    containers: int = 1,
    ready: bool = True,
    restarts: int = 0,
    labels: dict[str, str] | None = None,
    created: str = "2024-01-02T00:00:00Z",
) -> RawObject:
    requests: dict[str, str] = {}
    if cpu is not None:
        requests["cpu"] = cpu
    if memory is not None:
        requests["memory"] = memory
    spec_containers = [
        {"name": f"c{i}", "resources": {"requests": dict(requests)}}
        for i in range(containers)
    ]
    statuses = [
        {
            "name": f"c{i}",
            "ready": ready,
            "restartCount": restarts,
            "state": {"running": {}} if phase == "Running" else {},
        }
        for i in range(containers)
    ]
    spec: dict[str, Any] = {"containers": spec_containers}
    if node:
        spec["nodeName"] = node
    return {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": labels or {},
            "creationTimestamp": created,
        },
        "spec": spec,
        "status": {"phase": phase, "containerStatuses": statuses, "podIP": "10.1.0.5"},
    }


@pytest.fixture
def make_node() -> Callable[..., RawObject]:
    """Factory for raw node objects."""
    return build_node


@pytest.fixture
def make_pod() -> Callable[..., RawObject]:
    """Factory for raw pod objects."""
    return build_pod
