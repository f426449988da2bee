"""
Rule registry - Immutable table of per-field validation rules.

The set of recognized fields is closed and known at build time:

    name, furigana, email, password, phone, postcode,
    prefecture, city, address, remarks

Field names double as the ids used by the value source and error sink and
must match exactly.
"""

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .checks import (
    PASSWORD_SYMBOLS,
    CustomCheck,
    async_check,
    check_email_domain,
    check_furigana_separator,
    check_name_separator,
    check_password_diversity,
    postcode_exists_check,
)
from .ports import PostcodeDirectory, ValueSource

FIELD_NAMES = (
    "name",
    "furigana",
    "email",
    "password",
    "phone",
    "postcode",
    "prefecture",
    "city",
    "address",
    "remarks",
)

PREFECTURES = (
    "北海道", "青森県", "岩手県", "宮城県", "秋田県", "山形県", "福島県",
    "茨城県", "栃木県", "群馬県", "埼玉県", "千葉県", "東京都", "神奈川県",
    "新潟県", "富山県", "石川県", "福井県", "山梨県", "長野県", "岐阜県",
    "静岡県", "愛知県", "三重県", "滋賀県", "京都府", "大阪府", "兵庫県",
    "奈良県", "和歌山県", "鳥取県", "島根県", "岡山県", "広島県", "山口県",
    "徳島県", "香川県", "愛媛県", "高知県", "福岡県", "佐賀県", "長崎県",
    "熊本県", "大分県", "宮崎県", "鹿児島県", "沖縄県",
)  # fmt: skip

_HIRAGANA_TO_KATAKANA = {code: code + 0x60 for code in range(ord("ぁ"), ord("ん") + 1)}

_NAME_SEGMENT = "[ぁ-んァ-ンー一-龥a-zA-Z]{1,30}"
_KANA_SEGMENT = "[ァ-ンー]{1,30}"


@dataclass(frozen=True)
class FieldRule:
    """
    Static validation rule for one input field.

    `message` is the static message reported when `pattern` does not match.
    `custom` always follows the asynchronous check contract.
    """

    required: bool = False
    max_length: int | None = None
    pattern: re.Pattern[str] | None = None
    message: str | None = None
    normalize: Callable[[str], str] | None = None
    custom: CustomCheck | None = None


class FormSnapshot(Mapping[str, str]):
    """Read-only field-name -> value mapping captured once at submission time."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = MappingProxyType(dict(values))

    @classmethod
    def capture(cls, source: ValueSource, field_names: tuple[str, ...] = FIELD_NAMES) -> "FormSnapshot":
        """Read every field from the value source once."""
        return cls({name: source.get_value(name) for name in field_names})

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FormSnapshot({dict(self._values)!r})"


class RuleRegistry:
    """Read-only lookup of field rules, in display order."""

    def __init__(self, rules: Mapping[str, FieldRule]) -> None:
        self._rules = MappingProxyType(dict(rules))

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def lookup(self, field_name: str) -> FieldRule | None:
        return self._rules.get(field_name)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._rules


def normalize_name(value: str) -> str:
    """Full-width space to half-width, then trim."""
    return value.replace("　", " ").strip()


def normalize_furigana(value: str) -> str:
    """Hiragana to katakana, full-width space to half-width, then trim."""
    return value.translate(_HIRAGANA_TO_KATAKANA).replace("　", " ").strip()


def normalize_email(value: str) -> str:
    return value.lower().strip()


def strip_separators(value: str) -> str:
    """Remove hyphens and whitespace (phone numbers, postcodes)."""
    return re.sub(r"[-\s]", "", value)


def build_rule_registry(postcode_directory: PostcodeDirectory | None = None) -> RuleRegistry:
    """
    Build the registration form's rule table.

    Args:
        postcode_directory: Lookup used for the postcode existence check.
            When omitted, postcodes are checked by format only.
    """
    postcode_check = postcode_exists_check(postcode_directory) if postcode_directory else None

    return RuleRegistry(
        {
            "name": FieldRule(
                required=True,
                max_length=30,
                pattern=re.compile(rf"^{_NAME_SEGMENT}[\s　]{_NAME_SEGMENT}$"),
                message="姓と名の間にスペースを入れて入力してください",
                normalize=normalize_name,
                custom=async_check(check_name_separator),
            ),
            "furigana": FieldRule(
                required=True,
                max_length=30,
                pattern=re.compile(rf"^{_KANA_SEGMENT}[\s　]{_KANA_SEGMENT}$"),
                message="姓と名の間にスペースを入れて、カタカナで入力してください",
                normalize=normalize_furigana,
                custom=async_check(check_furigana_separator),
            ),
            "email": FieldRule(
                required=True,
                pattern=re.compile(
                    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
                    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
                    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
                ),
                message="正しいメールアドレスの形式で入力してください",
                normalize=normalize_email,
                custom=async_check(check_email_domain),
            ),
            "password": FieldRule(
                required=True,
                pattern=re.compile(r"^[A-Za-z\d" + re.escape(PASSWORD_SYMBOLS) + r"]{8,}$"),
                message="8文字以上の半角英数字・記号で入力してください",
                custom=async_check(check_password_diversity),
            ),
            "phone": FieldRule(
                required=True,
                pattern=re.compile(r"^0\d{9,10}$"),
                message="正しい電話番号の形式で入力してください（ハイフンなし）",
                normalize=strip_separators,
            ),
            "postcode": FieldRule(
                required=True,
                pattern=re.compile(r"^\d{7}$"),
                message="7桁の数字で入力してください（ハイフンなし）",
                normalize=strip_separators,
                custom=postcode_check,
            ),
            "prefecture": FieldRule(required=True),
            "city": FieldRule(required=True, max_length=30),
            "address": FieldRule(required=True, max_length=50),
            "remarks": FieldRule(required=False, max_length=255),
        }
    )


def prefecture_choices() -> tuple[str, ...]:
    """Options for the prefecture selector, north to south."""
    return PREFECTURES
