"""
ABOUTME: Validation rules applied to environment values after parsing
ABOUTME: Provides range, membership, email and URL checks as small rule objects
"""

import re
import string
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional
from urllib.parse import urlsplit

from .types import ScalarType, format_sequence, format_value, infer_scalar

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_EMAIL_CONTROL_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_ESCAPE_RE = re.compile(r"%([0-9A-Fa-f]{2})")
_PORT_RE = re.compile(r"[0-9]*")

_UNRESERVED = string.ascii_letters + string.digits + "-._~"
_HOST_CHARS = frozenset(_UNRESERVED + "!$&'()*+,;=:[]<>\"%")
_USERINFO_CHARS = frozenset(_UNRESERVED + "!$&'()*+,;=:%@")

_WSP = " \t"
_ATEXT = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-/=?^_`{|}~")


class ValidationRule(ABC):
    """Base class for validation rules.

    A rule inspects an already parsed value and returns None when it is
    acceptable, or the reason it is not. ``scalar`` is the type the rule
    expects to receive, used when the caller does not name one.
    """

    scalar: Optional[ScalarType] = None

    @abstractmethod
    def evaluate(self, value: Any) -> Optional[str]:
        pass

    def __call__(self, value: Any) -> Optional[str]:
        return self.evaluate(value)


class _OrderedRule(ValidationRule):
    """Shared bound handling for the numeric comparison rules."""

    def __init__(self, *bounds: Any):
        for bound in bounds:
            if isinstance(bound, bool) or not isinstance(bound, (int, float)):
                raise TypeError(
                    f"{type(self).__name__} bound must be int or float, "
                    f"got {type(bound).__name__}"
                )
        if any(isinstance(bound, float) for bound in bounds):
            self.scalar = ScalarType.FLOAT
        else:
            self.scalar = ScalarType.INT


class GreaterThan(_OrderedRule):
    def __init__(self, bound):
        super().__init__(bound)
        self.bound = bound

    def evaluate(self, value):
        if value <= self.bound:
            return f"must be greater than {format_value(self.bound)}"
        return None

    def __repr__(self):
        return f"GreaterThan({self.bound!r})"


class LessThan(_OrderedRule):
    def __init__(self, bound):
        super().__init__(bound)
        self.bound = bound

    def evaluate(self, value):
        if value >= self.bound:
            return f"must be less than {format_value(self.bound)}"
        return None

    def __repr__(self):
        return f"LessThan({self.bound!r})"


class Between(_OrderedRule):
    """Closed interval check, both ends accepted."""

    def __init__(self, minimum, maximum):
        super().__init__(minimum, maximum)
        self.minimum = minimum
        self.maximum = maximum

    def evaluate(self, value):
        if value < self.minimum or value > self.maximum:
            return (
                f"must be between {format_value(self.minimum)} "
                f"and {format_value(self.maximum)}"
            )
        return None

    def __repr__(self):
        return f"Between({self.minimum!r}, {self.maximum!r})"


class Within(ValidationRule):
    """Membership check by value equality.

    All members must share one scalar type, except that ints mixed with
    floats are read as floats. An empty collection rejects everything and
    leaves ``scalar`` unset.
    """

    def __init__(self, values: Iterable[Any]):
        self.values = tuple(values)
        kinds = {infer_scalar(v) for v in self.values}
        if kinds == {ScalarType.INT, ScalarType.FLOAT}:
            kinds = {ScalarType.FLOAT}
        if len(kinds) > 1:
            raise TypeError("Within values must all be of one scalar type")
        self.scalar = kinds.pop() if kinds else None

    def evaluate(self, value):
        # keep True from matching 1
        is_bool = isinstance(value, bool)
        if not any(
            v == value and isinstance(v, bool) == is_bool for v in self.values
        ):
            return f"{format_value(value)} not within {format_sequence(self.values)}"
        return None

    def __repr__(self):
        return f"Within({list(self.values)!r})"


class ValidEmail(ValidationRule):
    """Accepts a single RFC 5322 mailbox, with or without a display name."""

    scalar = ScalarType.STR

    def evaluate(self, value):
        if not is_email(value):
            return f"{value} is not a valid email"
        return None

    def __repr__(self):
        return "ValidEmail()"


class ValidUrl(ValidationRule):
    """Accepts syntactically well-formed URL references; never fetches them."""

    scalar = ScalarType.STR

    def evaluate(self, value):
        if not is_url(value):
            return f"{value} is not a valid url"
        return None

    def __repr__(self):
        return "ValidUrl()"


def is_email(value: str) -> bool:
    """Check for exactly one RFC 5322 mailbox.

    Either a bare ``local@domain`` or ``Display Name <local@domain>``. The
    local part is a dot-atom or quoted string; the domain is a dot-atom or
    a bracketed literal. Comments are only allowed around the whole mailbox
    and before the angle bracket.
    """
    if _EMAIL_CONTROL_RE.search(value):
        return False
    return _MailboxParser(value).parse()


class _MailboxParser:
    """Recursive descent over the mailbox grammar, one instance per input."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def parse(self) -> bool:
        if not self.skip_cfws():
            return False
        start = self.pos
        if self.addr_spec() and self.skip_cfws() and self.at_end():
            return True
        self.pos = start

        if not self.peek("<") and not self.phrase():
            return False
        self.skip_cfws()
        if not (self.consume("<") and self.addr_spec() and self.consume(">")):
            return False
        return self.skip_cfws() and self.at_end()

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, char: str) -> bool:
        return self.text.startswith(char, self.pos)

    def consume(self, char: str) -> bool:
        if self.peek(char):
            self.pos += 1
            return True
        return False

    def skip_space(self):
        while not self.at_end() and self.text[self.pos] in _WSP:
            self.pos += 1

    def skip_cfws(self) -> bool:
        """Skip whitespace and comments; False on an unterminated comment."""
        while True:
            self.skip_space()
            if not self.peek("("):
                return True
            if not self.comment():
                return False

    def comment(self) -> bool:
        depth = 0
        while not self.at_end():
            char = self.text[self.pos]
            self.pos += 1
            if char == "\\":
                if self.at_end():
                    return False
                self.pos += 1
            elif char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return True
        return False

    def addr_spec(self) -> bool:
        if self.peek('"'):
            if not self.quoted_string():
                return False
        elif not self.dot_atom():
            return False
        if not self.consume("@"):
            return False
        if self.peek("["):
            return self.domain_literal()
        return self.dot_atom()

    def atom(self, allow_dot: bool = False) -> bool:
        start = self.pos
        while not self.at_end():
            char = self.text[self.pos]
            if _is_atext(char) or (allow_dot and char == "."):
                self.pos += 1
            else:
                break
        return self.pos > start

    def dot_atom(self) -> bool:
        if not self.atom():
            return False
        while self.peek("."):
            self.pos += 1
            if not self.atom():
                return False
        return True

    def quoted_string(self) -> bool:
        self.pos += 1
        while not self.at_end():
            char = self.text[self.pos]
            self.pos += 1
            if char == '"':
                return True
            if char == "\\":
                if self.at_end():
                    return False
                self.pos += 1
            elif not (char in _WSP or _is_qtext(char)):
                return False
        return False

    def domain_literal(self) -> bool:
        self.pos += 1
        while not self.at_end():
            char = self.text[self.pos]
            self.pos += 1
            if char == "]":
                return True
            if char in "[\\" or not (0x21 <= ord(char) <= 0x7E):
                return False
        return False

    def phrase(self) -> bool:
        """Display name: one or more atoms or quoted strings."""
        words = 0
        while True:
            if not self.skip_cfws():
                return False
            if self.peek('"'):
                if not self.quoted_string():
                    return False
            elif not self.atom(allow_dot=True):
                return words > 0
            words += 1


def _is_atext(char: str) -> bool:
    return char in _ATEXT or ord(char) >= 0x80


def _is_qtext(char: str) -> bool:
    return (0x21 <= ord(char) <= 0x7E and char not in '"\\') or ord(char) >= 0x80


def is_url(value: str) -> bool:
    """Check URL syntax: scheme, authority and escapes.

    Relative references such as ``/path`` or ``name`` are accepted.
    """
    if _CONTROL_RE.search(value) or value.startswith(":"):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False

    if _BAD_ESCAPE_RE.search(parts.path) or _BAD_ESCAPE_RE.search(parts.fragment):
        return False
    if not parts.scheme and ":" in parts.path.split("/", 1)[0]:
        return False
    return _is_authority(parts.netloc)


def _is_authority(netloc: str) -> bool:
    userinfo, at, hostport = netloc.rpartition("@")
    if at and not _valid_chars(userinfo, _USERINFO_CHARS):
        return False

    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            return False
        host, port = hostport[: end + 1], hostport[end + 1 :]
        if port and not port.startswith(":"):
            return False
    else:
        host, colon, port = hostport.rpartition(":")
        if not colon:
            host, port = hostport, ""
        else:
            port = colon + port
    if port and not _PORT_RE.fullmatch(port[1:]):
        return False

    if not _valid_chars(host, _HOST_CHARS):
        return False
    for escape in _ESCAPE_RE.findall(host):
        # only non-ASCII bytes and the IPv6 zone separator may be escaped
        if int(escape, 16) < 0x80 and escape != "25":
            return False
    return True


def _valid_chars(text: str, allowed: frozenset) -> bool:
    if _BAD_ESCAPE_RE.search(text):
        return False
    return all(c in allowed or ord(c) >= 0x80 for c in text)
