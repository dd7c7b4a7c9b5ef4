"""Value-check mini-language: parsing and evaluation.

Every datatype carries a check expression of the form ``name`` or
``name(arg1,arg2,...)``. The grammar is flat: arguments are split on commas
and trimmed, and there is no quoting, escaping, or nesting. Expressions that
do not fit the grammar raise ``CheckSyntaxError`` instead of being guessed at.

Evaluation is fail-closed: a wrong value type, malformed arguments, or an
unknown check name all reject the value (and log why).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from email.errors import HeaderParseError
from email.headerregistry import Address
from email.utils import getaddresses
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from attimo.dates import is_valid_date
from attimo.errors import CheckSyntaxError

if TYPE_CHECKING:
    from attimo.datatypes import Datatype

_CHECK_PATTERN = re.compile(r"\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*(?:\((?P<args>[^()]*)\))?\s*")
_PHONE_PATTERN = re.compile(r"[0-9]+")
_PHONE_MIN_LENGTH = 7
_PHONE_MAX_LENGTH = 15


@dataclass(frozen=True)
class ParsedCheck:
    """A check expression reduced to its kind and argument list."""

    kind: str
    args: tuple[str, ...]
    expression: str


def parse_check(expression: str) -> ParsedCheck:
    """Parse ``name`` or ``name(a, b, ...)`` into a ParsedCheck.

    Raises:
        CheckSyntaxError: If the expression is empty, has unbalanced or
            nested parentheses, trailing text, or an invalid check name.
    """
    if not isinstance(expression, str) or not expression.strip():
        raise CheckSyntaxError(str(expression), "expression is empty")
    match = _CHECK_PATTERN.fullmatch(expression)
    if match is None:
        if expression.count("(") != expression.count(")"):
            reason = "unbalanced parentheses"
        elif expression.count("(") > 1:
            reason = "nested parentheses are not supported"
        else:
            reason = "expected name or name(arg1,arg2,...)"
        raise CheckSyntaxError(expression, reason)
    raw_args = match.group("args")
    if raw_args is None or not raw_args.strip():
        args: tuple[str, ...] = ()
    else:
        args = tuple(part.strip() for part in raw_args.split(","))
    return ParsedCheck(kind=match.group("name"), args=args, expression=expression)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------
# Each check receives a value already known to have the required type.


def _check_nonempty(value: str, args: tuple[str, ...], log: logging.Logger) -> bool:
    return value != ""


def _check_range(value: int, args: tuple[str, ...], log: logging.Logger) -> bool:
    if len(args) != 2:
        log.warning("range check needs exactly 2 arguments, got %d: %r", len(args), args)
        return False
    try:
        low, high = int(args[0]), int(args[1])
    except ValueError:
        log.warning("range check arguments must be integers: %r", args)
        return False
    return low <= value <= high


def _check_in(value: str, args: tuple[str, ...], log: logging.Logger) -> bool:
    return value in args


def _check_no(value: Any, args: tuple[str, ...], log: logging.Logger) -> bool:
    return True


def _check_url(value: str, args: tuple[str, ...], log: logging.Logger) -> bool:
    # Rejects bare "http://" and relative paths such as "/foo/bar".
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def _check_mail(value: str, args: tuple[str, ...], log: logging.Logger) -> bool:
    # A single mailbox only; "a@x.com, b@y.com" is an address list.
    addresses = getaddresses([value])
    if len(addresses) != 1:
        return False
    _, addr_spec = addresses[0]
    if not addr_spec:
        return False
    try:
        address = Address(addr_spec=addr_spec)
    except (ValueError, HeaderParseError):
        return False
    return bool(address.username) and bool(address.domain)


def _check_phone(value: str, args: tuple[str, ...], log: logging.Logger) -> bool:
    return bool(_PHONE_PATTERN.fullmatch(value)) and _PHONE_MIN_LENGTH <= len(value) <= _PHONE_MAX_LENGTH


def _check_file_exists(value: str, args: tuple[str, ...], log: logging.Logger) -> bool:
    # Path("") is the current directory; an empty value is never a file.
    return value != "" and Path(value).exists()


def _check_date(value: str, args: tuple[str, ...], log: logging.Logger) -> bool:
    return is_valid_date(value)


_CheckFn = Callable[[Any, tuple[str, ...], logging.Logger], bool]

# check name -> (required Python type or None for any, implementation)
CHECKS: dict[str, tuple[type | None, _CheckFn]] = {
    "nonempty": (str, _check_nonempty),
    "range": (int, _check_range),
    "in": (str, _check_in),
    "no": (None, _check_no),
    "url": (str, _check_url),
    "mail": (str, _check_mail),
    "phone": (str, _check_phone),
    "file_exists": (str, _check_file_exists),
    "date": (str, _check_date),
}


def _has_type(value: Any, required: type) -> bool:
    # bool is an int subclass but never a valid int for range checks
    if required is int and isinstance(value, bool):
        return False
    return isinstance(value, required)


# ---------------------------------------------------------------------------
# CheckEngine
# ---------------------------------------------------------------------------


class CheckEngine:
    """Evaluates values against datatype checks.

    Parsed checks are cached by datatype id, since datatypes are immutable
    once seeded. The logger is injected so each database instance can route
    validation diagnostics wherever its owner wants them.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self._cache: dict[int, ParsedCheck] = {}

    def parsed(self, datatype: Datatype) -> ParsedCheck:
        cached = self._cache.get(datatype.id)
        if cached is not None and cached.expression == datatype.value_check:
            return cached
        parsed = parse_check(datatype.value_check)
        self._cache[datatype.id] = parsed
        return parsed

    def clear(self) -> None:
        self._cache.clear()

    def validate_check(self, datatype: Datatype, value: Any) -> bool:
        """Return True when *value* passes the datatype's check.

        Raises CheckSyntaxError if the datatype's expression is malformed.
        """
        check = self.parsed(datatype)
        entry = CHECKS.get(check.kind)
        if entry is None:
            self.logger.error(
                "Unrecognized check %r on datatype %s",
                check.expression,
                datatype.name,
                extra={"column": datatype.name},
            )
            return False
        required, fn = entry
        if required is not None and not _has_type(value, required):
            self.logger.warning(
                "%s check on %s needs a %s value, got %s: %r",
                check.kind,
                datatype.name,
                required.__name__,
                type(value).__name__,
                value,
                extra={"column": datatype.name},
            )
            return False
        valid = fn(value, check.args, self.logger)
        if not valid:
            self.logger.debug("%s check failed on %s for value %r", check.kind, datatype.name, value)
        return valid
