"""
In-memory state adapters - ValueSource and NavigationHintStore.

Back the form inputs and the navigation hint with plain dictionaries, for
headless use and tests.
"""

from collections.abc import Mapping

from src.domain.rules import FIELD_NAMES


class InMemoryValueSource:
    """
    Implements ValueSource protocol over a dict of field values.

    Unknown ids read as empty strings, like a blank input.
    """

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values = dict.fromkeys(FIELD_NAMES, "")
        self._values.update(values or {})
        self.disabled: set[str] = set()

    def get_value(self, field_id: str) -> str:
        return self._values.get(field_id, "")

    def set_value(self, field_id: str, value: str) -> None:
        self._values[field_id] = value

    def disable(self, field_id: str) -> None:
        self.disabled.add(field_id)

    def enable(self, field_id: str) -> None:
        self.disabled.discard(field_id)

    def is_disabled(self, field_id: str) -> bool:
        return field_id in self.disabled


class InMemoryHintStore:
    """Implements NavigationHintStore protocol with a single token."""

    def __init__(self, token: str | None = None) -> None:
        self.token = token

    def read(self) -> str | None:
        return self.token

    def write(self, token: str) -> None:
        self.token = token
