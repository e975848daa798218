"""
Observability module for fitquest.

This module provides:
- Metrics collection with Prometheus
"""

__all__ = ["metrics"]
