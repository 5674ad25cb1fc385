"""Observability: logging and metrics for the mock client."""

from natsmock.observability.logger import get_logger
from natsmock.observability.metrics import Metrics

__all__ = ["get_logger", "Metrics"]
