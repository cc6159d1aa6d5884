"""Resource parsing utilities for CPU, memory and storage values.

Provides functions to parse Kubernetes resource strings into standardized formats:
- CPU: parsed to cores (float) or millicores
- Memory/storage: parsed to bytes
"""

from typing import Any

# Binary suffixes must be checked before the single-letter decimal ones.
_MEMORY_BYTES_MULTIPLIERS: tuple[tuple[str, float], ...] = (
    ("Ki", 1024),
    ("Mi", 1024**2),
    ("Gi", 1024**3),
    ("Ti", 1024**4),
    ("Pi", 1024**5),
    ("Ei", 1024**6),
    ("k", 1000),
    ("K", 1000),
    ("M", 1000**2),
    ("G", 1000**3),
    ("T", 1000**4),
    ("P", 1000**5),
    ("E", 1000**6),
    ("m", 0.001),
)


def parse_cpu(cpu_str: str) -> float:
    """Parse CPU string to cores (float).

    Handles various CPU resource formats:
    - Nanocores: "500000000n" -> 0.5 cores
    - Microcores: "500000u" -> 0.5 cores
    - Millicores: "100m" -> 0.1 cores
    - Decimal: "1.5" -> 1.5 cores
    - Integer: "2" -> 2.0 cores

    Args:
        cpu_str: CPU value as string (e.g., "100m", "1.5", "500")

    Returns:
        CPU value in cores as float. Returns 0.0 on parse error or empty string.
    """
    if not cpu_str:
        return 0.0

    cpu_str = str(cpu_str).strip()

    # Handle nanocores (e.g., "500000000n" -> 0.5)
    if cpu_str.endswith("n"):
        try:
            return float(cpu_str[:-1]) / 1_000_000_000
        except ValueError:
            return 0.0

    # Handle microcores (e.g., "500000u" -> 0.5)
    if cpu_str.endswith("u"):
        try:
            return float(cpu_str[:-1]) / 1_000_000
        except ValueError:
            return 0.0

    # Handle millicores (e.g., "100m" -> 0.1)
    if cpu_str.endswith("m"):
        try:
            return float(cpu_str[:-1]) / 1000
        except ValueError:
            return 0.0

    # Handle plain numbers (cores)
    try:
        return float(cpu_str)
    except ValueError:
        return 0.0


def parse_cpu_mcores(cpu_str: str) -> float:
    """Parse CPU string to millicores, never negative."""
    return max(0.0, parse_cpu(cpu_str) * 1000)


def memory_str_to_bytes(memory_str: str) -> float:
    """Convert memory or storage quantity string to bytes.

    Handles binary ("512Mi", "1Gi") and decimal ("500M", "1G") suffixes
    as well as plain byte counts.

    Args:
        memory_str: Quantity as string (e.g., "512Mi", "1Gi", "100G")

    Returns:
        Value in bytes as float. Returns 0.0 on parse error or empty string.
    """
    if not memory_str:
        return 0.0

    memory_str = str(memory_str).strip()

    for suffix, mult in _MEMORY_BYTES_MULTIPLIERS:
        if memory_str.endswith(suffix):
            try:
                value = float(memory_str[: -len(suffix)])
                return max(0.0, value * mult)
            except ValueError:
                return 0.0

    # Handle plain bytes (including exponent notation such as "1e9")
    try:
        return max(0.0, float(memory_str))
    except ValueError:
        return 0.0


def container_requests(container: dict[str, Any]) -> tuple[float, float]:
    """Return a container's (cpu millicores, memory bytes) requests."""
    resources = container.get("resources") or {}
    requests = resources.get("requests") or {}
    if not isinstance(requests, dict):
        return 0.0, 0.0
    return (
        parse_cpu_mcores(requests.get("cpu", "0")),
        memory_str_to_bytes(requests.get("memory", "0")),
    )


def pod_requests(pod: dict[str, Any]) -> tuple[float, float]:
    """Sum the requested CPU (millicores) and memory (bytes) of a pod's containers."""
    cpu_total = 0.0
    mem_total = 0.0
    for container in pod.get("spec", {}).get("containers", []) or []:
        cpu, mem = container_requests(container)
        cpu_total += cpu
        mem_total += mem
    return cpu_total, mem_total


def bytes_to_gib(value: float) -> float:
    """Convert bytes to GiB."""
    return value / 1024**3
