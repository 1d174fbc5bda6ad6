"""Analyzers that find misconfigured or failing Kubernetes objects held in memory."""

__version__ = "0.1.0"