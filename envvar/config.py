"""
ABOUTME: Typed environment variable access
ABOUTME: Looks up a variable, converts it to a scalar type and optionally validates it
"""

import logging
import os
from typing import Any, Callable, Mapping, Optional, Union

from .exceptions import NotSetError, ParseError, RetrievalError, ValidationError
from .types import ScalarType, infer_scalar

Rule = Callable[[Any], Optional[str]]
ScalarLike = Union[ScalarType, str, type]

_PYTHON_TYPES = {
    str: ScalarType.STR,
    bool: ScalarType.BOOL,
    int: ScalarType.INT,
    float: ScalarType.FLOAT,
}


def resolve_scalar(scalar: ScalarLike) -> ScalarType:
    """Accept a ScalarType, its name ("uint") or a builtin type (int)."""
    if isinstance(scalar, ScalarType):
        return scalar
    if isinstance(scalar, type):
        if scalar in _PYTHON_TYPES:
            return _PYTHON_TYPES[scalar]
        raise TypeError(f"unsupported scalar type: {scalar.__name__}")
    try:
        return ScalarType(scalar)
    except ValueError as e:
        raise TypeError(f"unsupported scalar type: {scalar!r}") from e


class TypedEnvAccessor:
    """Reads variables from an environment mapping as typed values.

    The mapping defaults to ``os.environ`` and is only ever read. Every
    error raised carries the zero value of the requested type as ``.value``.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def lookup(self, name: str, scalar: ScalarLike = ScalarType.STR) -> Any:
        """
        Return the variable converted to ``scalar``.

        Raises:
            NotSetError: the variable is absent.
            ParseError: the variable is present but not a valid literal.
        """
        scalar = resolve_scalar(scalar)
        raw = self.environ.get(name)
        if raw is None:
            raise NotSetError(name, scalar.zero)
        try:
            value = scalar.parse(raw)
        except ValueError as e:
            raise ParseError(str(e), name, scalar.zero) from e
        logging.debug(f"Resolved {name} as {scalar.value}")
        return value

    def get(self, name: str, scalar: ScalarLike = ScalarType.STR) -> Any:
        """Return the converted variable, or the zero value of its type."""
        scalar = resolve_scalar(scalar)
        return self.get_with_default(name, scalar.zero, scalar)

    def get_with_default(
        self, name: str, default: Any, scalar: Optional[ScalarLike] = None
    ) -> Any:
        """
        Return the converted variable, or ``default`` on any failure.

        Missing and malformed variables are treated alike. The type is taken
        from ``default`` unless given.
        """
        scalar = infer_scalar(default) if scalar is None else resolve_scalar(scalar)
        try:
            return self.lookup(name, scalar)
        except (NotSetError, ParseError):
            return default

    def get_and_validate(
        self,
        name: str,
        rule: Rule,
        scalar: Optional[ScalarLike] = None,
    ) -> Any:
        """
        Return the converted variable once ``rule`` accepts it.

        The type is taken from the rule unless given. Retrieval is checked
        before validation, so the rule only ever sees a parsed value.

        Raises:
            RetrievalError: the variable is absent or not a valid literal.
            ValidationError: the rule returned a failure reason.
        """
        if scalar is None:
            scalar = getattr(rule, "scalar", None)
            if scalar is None:
                raise TypeError(f"cannot infer a scalar type from {rule!r}")
        scalar = resolve_scalar(scalar)

        try:
            value = self.lookup(name, scalar)
        except (NotSetError, ParseError) as e:
            raise RetrievalError(name, e, scalar.zero) from e

        reason = rule(value)
        if reason is not None:
            raise ValidationError(name, reason, scalar.zero)
        return value


_default_accessor = TypedEnvAccessor()


def lookup(name: str, scalar: ScalarLike = ScalarType.STR) -> Any:
    """Read ``name`` from the process environment as ``scalar``."""
    return _default_accessor.lookup(name, scalar)


def get(name: str, scalar: ScalarLike = ScalarType.STR) -> Any:
    return _default_accessor.get(name, scalar)


def get_with_default(
    name: str, default: Any, scalar: Optional[ScalarLike] = None
) -> Any:
    return _default_accessor.get_with_default(name, default, scalar)


def get_and_validate(
    name: str, rule: Rule, scalar: Optional[ScalarLike] = None
) -> Any:
    return _default_accessor.get_and_validate(name, rule, scalar)
