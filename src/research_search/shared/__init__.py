"""
Shared kernel for Research Search MCP.

Provides:
- Unified exception hierarchy
- Async utilities for fan-out and outbound HTTP
"""

from .async_utils import (
    # Fault tolerance
    CircuitBreaker,
    batch_process,
    # Parallel execution
    gather_with_errors,
    # Utilities
    timeout_with_fallback,
)
from .exceptions import (
    # API errors
    APIError,
    # Configuration errors
    ConfigurationError,
    # Data errors
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    # Generation errors
    GenerationError,
    InvalidParameterError,
    InvalidQueryError,
    ParseError,
    RateLimitError,
    # Base
    ResearchSearchError,
    ScanStateError,
    # Validation errors
    ValidationError,
    # Utilities
    get_retry_delay,
    is_retryable_error,
)

__all__ = [
    # Exceptions
    "ResearchSearchError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "APIError",
    "RateLimitError",
    "ValidationError",
    "InvalidQueryError",
    "InvalidParameterError",
    "DataError",
    "ScanStateError",
    "ParseError",
    "GenerationError",
    "ConfigurationError",
    "is_retryable_error",
    "get_retry_delay",
    # Async utilities
    "gather_with_errors",
    "batch_process",
    "CircuitBreaker",
    "timeout_with_fallback",
]
