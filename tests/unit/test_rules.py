"""
Unit tests for the rule registry.

Tests verify:
- The closed field set and its order
- Registry immutability and lookups
- Normalizers
- Form snapshots
"""

from dataclasses import FrozenInstanceError

import pytest

from src.adapters.memory.state import InMemoryValueSource
from src.domain.rules import (
    FIELD_NAMES,
    PREFECTURES,
    FieldRule,
    FormSnapshot,
    RuleRegistry,
    build_rule_registry,
    normalize_email,
    normalize_furigana,
    normalize_name,
    prefecture_choices,
    strip_separators,
)


class TestRegistryContents:
    """Tests for the default rule table."""

    def test_field_names_exact(self, registry: RuleRegistry) -> None:
        """Field names match the value source / error sink ids exactly."""
        assert registry.field_names == (
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
        assert registry.field_names == FIELD_NAMES

    def test_only_remarks_is_optional(self, registry: RuleRegistry) -> None:
        optional = [name for name in registry.field_names if not registry.lookup(name).required]
        assert optional == ["remarks"]

    @pytest.mark.parametrize(
        ("field_name", "max_length"),
        [("name", 30), ("furigana", 30), ("city", 30), ("address", 50), ("remarks", 255), ("email", None)],
    )
    def test_length_bounds(self, registry: RuleRegistry, field_name: str, max_length: int | None) -> None:
        assert registry.lookup(field_name).max_length == max_length

    def test_prefecture_has_no_pattern(self, registry: RuleRegistry) -> None:
        rule = registry.lookup("prefecture")
        assert rule.pattern is None
        assert rule.custom is None

    def test_postcode_without_directory_has_no_custom_check(self, registry: RuleRegistry) -> None:
        assert registry.lookup("postcode").custom is None

    def test_postcode_with_directory_has_custom_check(self) -> None:
        class Directory:
            async def exists(self, postcode: str) -> bool:
                return True

        assert build_rule_registry(Directory()).lookup("postcode").custom is not None

    def test_unknown_field_lookup(self, registry: RuleRegistry) -> None:
        assert registry.lookup("nickname") is None
        assert "nickname" not in registry
        assert "email" in registry


class TestRegistryImmutability:
    """Tests that rules cannot change after construction."""

    def test_field_rule_is_frozen(self, registry: RuleRegistry) -> None:
        rule = registry.lookup("name")
        with pytest.raises(FrozenInstanceError):
            rule.required = False  # type: ignore[misc]

    def test_registry_copies_input(self) -> None:
        rules = {"a": FieldRule(required=True)}
        registry = RuleRegistry(rules)
        rules["b"] = FieldRule()
        assert registry.field_names == ("a",)


class TestNormalizers:
    """Tests for value normalizers."""

    def test_name_full_width_space(self) -> None:
        assert normalize_name("  田中　太郎 ") == "田中 太郎"

    def test_furigana_hiragana_to_katakana(self) -> None:
        assert normalize_furigana("たなか　たろう") == "タナカ タロウ"

    def test_furigana_keeps_katakana(self) -> None:
        assert normalize_furigana("タナカ タロウ") == "タナカ タロウ"

    def test_email_lowercase_and_trim(self) -> None:
        assert normalize_email("  Taro@Example.COM ") == "taro@example.com"

    @pytest.mark.parametrize(("raw", "expected"), [("090-1234-5678", "09012345678"), ("100 0001", "1000001")])
    def test_strip_separators(self, raw: str, expected: str) -> None:
        assert strip_separators(raw) == expected


class TestFormSnapshot:
    """Tests for FormSnapshot capture."""

    def test_capture_reads_every_field(self, valid_form: dict[str, str]) -> None:
        snapshot = FormSnapshot.capture(InMemoryValueSource(valid_form))
        assert dict(snapshot) == valid_form
        assert list(snapshot) == list(FIELD_NAMES)

    def test_snapshot_is_detached_from_source(self, valid_form: dict[str, str]) -> None:
        source = InMemoryValueSource(valid_form)
        snapshot = FormSnapshot.capture(source)
        source.set_value("name", "山田 花子")
        assert snapshot["name"] == "田中 太郎"

    def test_snapshot_is_read_only(self) -> None:
        snapshot = FormSnapshot({"name": "x"})
        with pytest.raises(TypeError):
            snapshot["name"] = "y"  # type: ignore[index]


class TestPrefectures:
    """Tests for the prefecture choices."""

    def test_forty_seven_prefectures(self) -> None:
        assert len(prefecture_choices()) == 47
        assert len(set(PREFECTURES)) == 47

    def test_order_north_to_south(self) -> None:
        assert prefecture_choices()[0] == "北海道"
        assert prefecture_choices()[-1] == "沖縄県"
