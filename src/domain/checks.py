"""
Custom field checks - Domain-specific rules beyond pattern matching.

Every check shares one asynchronous contract: it receives the normalized
value and returns a ValidationOutcome. Synchronous checks are adapted with
`async_check` so the field validator always awaits.
"""

import functools
import inspect
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .exceptions import PostcodeLookupError
from .ports import FailureKind, PostcodeDirectory, ValidationOutcome

logger = logging.getLogger(__name__)

CustomCheck = Callable[[str], Awaitable[ValidationOutcome]]

PASSWORD_SYMBOLS = '!@#$%^&*(),.?":{}|<>'

# Frequently mistyped domains -> intended domain
MISTYPED_EMAIL_DOMAINS = {
    "gmail.co.jp": "gmail.com",
    "gmial.com": "gmail.com",
    "gmai.com": "gmail.com",
    "outlook.co.jp": "outlook.com",
    "hotmial.com": "hotmail.com",
    "yahoo.co.jo": "yahoo.co.jp",
    "yahooo.co.jp": "yahoo.co.jp",
}

_CHARACTER_CLASSES = (
    re.compile(r"[A-Z]"),
    re.compile(r"[a-z]"),
    re.compile(r"\d"),
    re.compile("[" + re.escape(PASSWORD_SYMBOLS) + "]"),
)

_STRENGTH_LABELS = {
    0: "非常に弱い: パスワードの要件を満たしていません",
    1: "弱い: より複雑なパスワードを設定してください",
    2: "普通: まだ改善の余地があります",
    3: "強い: 良好なパスワードです",
    4: "非常に強い: 非常に安全なパスワードです",
    5: "完璧: 最高レベルの安全性です",
}


def async_check(check: Callable[[str], ValidationOutcome | Awaitable[ValidationOutcome]]) -> CustomCheck:
    """
    Adapt a check to the asynchronous contract.

    Coroutine functions are returned unchanged; plain functions are wrapped.
    """
    if inspect.iscoroutinefunction(check):
        return check

    @functools.wraps(check)
    async def wrapper(value: str) -> ValidationOutcome:
        return check(value)  # type: ignore[return-value]

    return wrapper


def _custom_failure(message: str, suggestion: str | None = None) -> ValidationOutcome:
    return ValidationOutcome.failed(FailureKind.CUSTOM_RULE_FAILED, message, suggestion=suggestion)


def _has_separated_segments(value: str) -> bool:
    first, separator, last = value.partition(" ")
    return bool(separator) and bool(first.strip()) and bool(last.strip())


def check_name_separator(value: str) -> ValidationOutcome:
    """Family and given name must be separated by a space."""
    if not _has_separated_segments(value):
        return _custom_failure("姓と名の間にスペースを入れてください")
    return ValidationOutcome.passed(value)


def check_furigana_separator(value: str) -> ValidationOutcome:
    """Family and given name readings must be separated by a space."""
    if not _has_separated_segments(value):
        return _custom_failure("セイとメイの間にスペースを入れてください")
    return ValidationOutcome.passed(value)


def suggest_email(value: str) -> str | None:
    """
    Propose a corrected address when the domain is a known typo.

    Returns:
        Corrected address, or None if the domain is not in the typo table
    """
    local, at, domain = value.rpartition("@")
    if not at:
        return None
    corrected = MISTYPED_EMAIL_DOMAINS.get(domain.lower())
    if corrected is None:
        return None
    return f"{local}@{corrected}"


def check_email_domain(value: str) -> ValidationOutcome:
    suggestion = suggest_email(value)
    if suggestion is not None:
        return _custom_failure(f"もしかして: {suggestion}?", suggestion=suggestion)
    return ValidationOutcome.passed(value)


def count_character_classes(password: str) -> int:
    """Number of classes present among upper, lower, digit and symbol."""
    return sum(1 for pattern in _CHARACTER_CLASSES if pattern.search(password))


def check_password_diversity(value: str) -> ValidationOutcome:
    """At least 3 of the 4 character classes are required."""
    if count_character_classes(value) < 3:
        return _custom_failure("大文字、小文字、数字、記号のうち3種類以上を含めてください")
    return ValidationOutcome.passed(value)


@dataclass(frozen=True)
class PasswordStrength:
    """Strength meter reading: score 0-5 and a label."""

    score: int
    label: str


def evaluate_password_strength(password: str) -> PasswordStrength:
    """
    Score a password for display.

    One point each for length >= 8 and for every character class present.
    This is informational only; acceptance is decided by the password rule.
    """
    score = int(len(password) >= 8) + count_character_classes(password)
    return PasswordStrength(score=score, label=_STRENGTH_LABELS[score])


def postcode_exists_check(directory: PostcodeDirectory) -> CustomCheck:
    """
    Build the postcode existence check backed by a directory lookup.

    A lookup that cannot be performed does not block registration: the
    check passes and a warning is logged.
    """

    async def check_postcode_exists(value: str) -> ValidationOutcome:
        try:
            found = await directory.exists(value)
        except PostcodeLookupError as exc:
            logger.warning("Postcode lookup unavailable, skipping existence check: %s", exc)
            return ValidationOutcome.passed(value)

        if not found:
            return _custom_failure("存在しない郵便番号です")
        return ValidationOutcome.passed(value)

    return check_postcode_exists
