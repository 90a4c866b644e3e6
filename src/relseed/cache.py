"""Per-run caches for generated values and keys.

Every generation run creates its own instances; nothing here is shared
between runs.
"""

from __future__ import annotations

from typing import Any

_MISSING = object()


class ValueCache:
    """Cache of generated property values, keyed by (type, property) then record."""

    def __init__(self) -> None:
        """Initialize cache."""
        self._cache: dict[tuple[str, str], dict[int, Any]] = {}

    def contains(self, type_name: str, property_name: str, record_index: int) -> bool:
        """Check if a value was generated for the record."""
        return record_index in self._cache.get((type_name, property_name), {})

    def get(
        self, type_name: str, property_name: str, record_index: int, default: Any = None
    ) -> Any:
        """Get cached value.

        Args:
            type_name: Fully qualified type name
            property_name: Property name
            record_index: Record index
            default: Returned when nothing is cached

        Returns:
            Cached value (which may itself be None) or default
        """
        value = self._cache.get((type_name, property_name), {}).get(record_index, _MISSING)
        return default if value is _MISSING else value

    def set(self, type_name: str, property_name: str, record_index: int, value: Any) -> None:
        """Set cached value."""
        self._cache.setdefault((type_name, property_name), {})[record_index] = value

    def clear(self) -> None:
        """Clear cache."""
        self._cache.clear()


class EnumValueCache:
    """Cache of randomly chosen enum members, keyed by (enum type, record index)."""

    def __init__(self) -> None:
        """Initialize cache."""
        self._cache: dict[tuple[str, int], tuple[str, ...]] = {}

    def get(self, type_name: str, record_index: int) -> tuple[str, ...] | None:
        """Get cached members or None."""
        return self._cache.get((type_name, record_index))

    def set(self, type_name: str, record_index: int, members: tuple[str, ...]) -> None:
        """Set cached members."""
        self._cache[(type_name, record_index)] = members

    def clear(self) -> None:
        """Clear cache."""
        self._cache.clear()


class GeneratedKeyRegistry:
    """Primary keys generated so far, per entity, in record order."""

    def __init__(self) -> None:
        """Initialize registry."""
        self._keys: dict[str, list[Any]] = {}

    def start(self, entity_name: str) -> None:
        """Reset the key list for an entity that is about to be generated."""
        self._keys[entity_name] = []

    def add(self, entity_name: str, key: Any) -> None:
        """Append a generated key.

        Args:
            entity_name: Entity name
            key: Key value (UUID, int or other typed value)
        """
        self._keys.setdefault(entity_name, []).append(key)

    def get(self, entity_name: str) -> list[Any]:
        """Get generated keys for an entity (empty if none)."""
        return list(self._keys.get(entity_name, []))

    def get_key(self, entity_name: str, index: int) -> Any:
        """Get the key of one record.

        Returns:
            Key value, or None when the index is out of range
        """
        keys = self._keys.get(entity_name, [])
        if 0 <= index < len(keys):
            return keys[index]
        return None

    def count(self, entity_name: str) -> int:
        """Number of keys generated for an entity."""
        return len(self._keys.get(entity_name, []))

    def has_keys(self, entity_name: str) -> bool:
        return self.count(entity_name) > 0

    def clear(self) -> None:
        """Clear registry."""
        self._keys.clear()
