"""Topology containers."""
