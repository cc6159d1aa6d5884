"""Cluster domain - data sources, parsers and host probes."""
