"""
ABOUTME: Supported scalar types and their text conversions
ABOUTME: Maps each type to its parser and zero value and renders values for messages
"""

import math
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1
UINT_MAX = 2**64 - 1

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?inf(?:inity)?|nan",
    re.IGNORECASE,
)
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)p[+-]?[0-9]+", re.IGNORECASE
)


class ScalarType(Enum):
    """The closed set of types a variable can be converted to."""

    STR = "str"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"

    @property
    def zero(self) -> Any:
        return _ZERO[self]

    def parse(self, raw: str) -> Any:
        """Convert raw text to this type, raising ValueError when it cannot."""
        return _PARSERS[self](raw)


def _parse_str(raw: str) -> str:
    return raw


def _parse_bool(raw: str) -> bool:
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"invalid literal for bool: {raw!r}")


def _parse_int(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f"invalid literal for int() with base 10: {raw!r}")
    value = int(raw)
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"value out of range for int: {raw!r}")
    return value


def _parse_uint(raw: str) -> int:
    if not _UINT_RE.fullmatch(raw):
        raise ValueError(f"invalid literal for uint with base 10: {raw!r}")
    value = int(raw)
    if value > UINT_MAX:
        raise ValueError(f"value out of range for uint: {raw!r}")
    return value


def _parse_float(raw: str) -> float:
    if _HEX_FLOAT_RE.fullmatch(raw):
        try:
            return float.fromhex(raw)
        except OverflowError as e:
            raise ValueError(f"value out of range for float: {raw!r}") from e
    if not _FLOAT_RE.fullmatch(raw):
        raise ValueError(f"could not convert string to float: {raw!r}")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise ValueError(f"value out of range for float: {raw!r}")
    return value


_PARSERS: Dict[ScalarType, Callable[[str], Any]] = {
    ScalarType.STR: _parse_str,
    ScalarType.BOOL: _parse_bool,
    ScalarType.INT: _parse_int,
    ScalarType.UINT: _parse_uint,
    ScalarType.FLOAT: _parse_float,
}

_ZERO: Dict[ScalarType, Any] = {
    ScalarType.STR: "",
    ScalarType.BOOL: False,
    ScalarType.INT: 0,
    ScalarType.UINT: 0,
    ScalarType.FLOAT: 0.0,
}


def infer_scalar(value: Any) -> ScalarType:
    """Pick the scalar type matching a Python value.

    Non-negative integers map to INT like any other integer; UINT has to be
    requested explicitly.
    """
    # bool before int, it is a subclass
    if isinstance(value, bool):
        return ScalarType.BOOL
    if isinstance(value, int):
        return ScalarType.INT
    if isinstance(value, float):
        return ScalarType.FLOAT
    if isinstance(value, str):
        return ScalarType.STR
    raise TypeError(f"unsupported scalar type: {type(value).__name__}")


def format_value(value: Any) -> str:
    """Render a scalar the way existing error messages expect.

    Booleans are lowercase and floats use the shortest round-tripping digits,
    switching to exponent form below 1e-4 and from 1e6 up.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def format_sequence(values) -> str:
    return "[" + " ".join(format_value(v) for v in values) + "]"


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped

    prefix = "-" if sign else ""
    sci = len(digits) + exponent - 1
    if sci < -4 or sci >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{'+' if sci >= 0 else '-'}{abs(sci):02d}"
    if exponent >= 0:
        return prefix + digits + "0" * exponent
    point = len(digits) + exponent
    if point > 0:
        return f"{prefix}{digits[:point]}.{digits[point:]}"
    return f"{prefix}0.{'0' * -point}{digits}"
