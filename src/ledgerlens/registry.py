from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ledgerlens.definitions import build_definitions
from ledgerlens.errors import UnknownDefinitionError
from ledgerlens.models import Definition, DefinitionKey


class DefinitionRegistry:
    """Read-only catalog of definitions, fixed at construction."""

    def __init__(self, definitions: Mapping[DefinitionKey, Definition]):
        self._definitions = MappingProxyType(dict(definitions))

    def get(self, key: DefinitionKey) -> Definition | None:
        return self._definitions.get(key)

    def __getitem__(self, key: DefinitionKey) -> Definition:
        definition = self._definitions.get(key)
        if definition is None:
            raise UnknownDefinitionError(f"No definition registered for {key!r}", definition=key)
        return definition

    def __contains__(self, key) -> bool:
        return key in self._definitions

    def __iter__(self) -> Iterator[DefinitionKey]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def keys(self) -> list[DefinitionKey]:
        return list(self._definitions)

    def items(self) -> list[tuple[DefinitionKey, Definition]]:
        return list(self._definitions.items())


def resolve_key(name: str) -> DefinitionKey:
    """Look up a key by its value ("capital_one") or member name ("CAPITAL_ONE")."""
    for key in DefinitionKey:
        if name in (key.value, key.name):
            return key
    raise UnknownDefinitionError(f"Unknown definition: {name}")


registry = DefinitionRegistry(build_definitions())
