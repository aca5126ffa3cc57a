"""
ABOUTME: Custom exception classes for typed environment variable access
ABOUTME: Provides specific error types for missing, unparseable and invalid variables
"""

from typing import Any

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote(name: str) -> str:
    """Render a variable name double-quoted, as it appears in error messages.

    Printable characters are kept, including non-ASCII ones; anything else is
    written as a backslash escape.
    """
    out = []
    for char in name:
        code = ord(char)
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif char.isprintable():
            out.append(char)
        elif code < 0x80:
            out.append(f"\\x{code:02x}")
        elif code <= 0xFFFF:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    return '"' + "".join(out) + '"'


class ConfigError(Exception):
    """Base class for environment configuration errors.

    Every error carries the variable ``name`` and the zero ``value`` of the
    requested type, which is what a caller gets back instead of a parsed value.
    """

    def __init__(self, message: str = "", name: str = "", value: Any = None):
        super().__init__(message)
        self.name = name
        self.value = value


class NotSetError(ConfigError):
    """Variable is absent from the environment."""

    def __init__(self, name: str, value: Any = None):
        super().__init__(f"{quote(name)} is not set", name, value)


class ParseError(ConfigError):
    """Variable is present but not convertible to the requested type."""

    pass


class RetrievalError(ConfigError):
    """Variable could not be obtained or parsed before validation."""

    def __init__(self, name: str, cause: ConfigError, value: Any = None):
        super().__init__(f"could not parse {quote(name)}: {cause}", name, value)
        self.cause = cause


class ValidationError(ConfigError):
    """Variable parsed but failed a validation rule."""

    def __init__(self, name: str, reason: str, value: Any = None):
        super().__init__(f"{quote(name)} failed validation: {reason}", name, value)
        self.reason = reason
