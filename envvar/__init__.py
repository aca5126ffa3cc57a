"""
ABOUTME: Typed environment variable access for application startup code
ABOUTME: Provides typed lookup, default fallback and validation rules for env vars
"""

from .config import (
    TypedEnvAccessor,
    get,
    get_and_validate,
    get_with_default,
    lookup,
)
from .exceptions import (
    ConfigError,
    NotSetError,
    ParseError,
    RetrievalError,
    ValidationError,
)
from .types import ScalarType
from .validators import (
    Between,
    GreaterThan,
    LessThan,
    ValidationRule,
    ValidEmail,
    ValidUrl,
    Within,
)

__version__ = "0.1.0"
__all__ = [
    "TypedEnvAccessor",
    "lookup",
    "get",
    "get_with_default",
    "get_and_validate",
    "ScalarType",
    "ValidationRule",
    "GreaterThan",
    "LessThan",
    "Between",
    "Within",
    "ValidEmail",
    "ValidUrl",
    "ConfigError",
    "NotSetError",
    "ParseError",
    "RetrievalError",
    "ValidationError",
]
