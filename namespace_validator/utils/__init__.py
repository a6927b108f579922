"""
Utility modules for the namespace validator.
"""

from namespace_validator.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_api_call,
    log_validation_outcome,
    log_error_with_context,
)
from namespace_validator.utils.metrics import (
    RunMetrics,
    track_api_call,
    emit_metric,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_api_call",
    "log_validation_outcome",
    "log_error_with_context",
    "RunMetrics",
    "track_api_call",
    "emit_metric",
]
