"""Out-of-band host probes."""

from kubelens.controllers.cluster.probes.host_prober import HostProber, extract_status

__all__ = ["HostProber", "extract_status"]
