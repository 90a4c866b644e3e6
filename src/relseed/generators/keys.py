"""Primary key generation."""

import hashlib
import uuid
from typing import Any, Optional

from relseed.models import INTEGER_KEY_TYPES, PropertySchema


def deterministic_guid(entity_name: str, index: int, salt: str = "") -> uuid.UUID:
    """
    Derive a GUID from an entity name and record index.

    The GUID is the MD5 digest of ``"{entity_name}_{index}"`` (plus the
    optional salt), so the same inputs always give the same key.

    Args:
        entity_name: Entity name
        index: Zero-based record index
        salt: Extra input for projects that need distinct key sets

    Returns:
        UUID built from the digest

    Example:
        >>> deterministic_guid("Author", 0) == deterministic_guid("Author", 0)
        True
        >>> deterministic_guid("Author", 0) == deterministic_guid("Author", 1)
        False
    """
    key = f"{entity_name}_{index}"
    if salt:
        key = f"{key}_{salt}"
    return uuid.UUID(bytes=hashlib.md5(key.encode("utf-8")).digest())


class KeyGenerator:
    """
    Generate primary keys for one entity.

    GUID keys are derived with ``deterministic_guid`` and integer keys are
    sequential (1-based). Other key types are not handled here; ``generate``
    returns None and the caller falls back to the standard generator.
    """

    def __init__(self, entity_name: str, salt: str = ""):
        """
        Initialize key generator.

        Args:
            entity_name: Entity whose keys are generated
            salt: Optional salt for GUID keys
        """
        self.entity_name = entity_name
        self.salt = salt

    def supports(self, key_property: PropertySchema) -> bool:
        """Check if the key type is generated here."""
        canonical = key_property.canonical_type
        return canonical == "Guid" or canonical in INTEGER_KEY_TYPES

    def generate(self, key_property: PropertySchema, index: int) -> Optional[Any]:
        """
        Generate the key of one record.

        Args:
            key_property: Key property
            index: Zero-based record index

        Returns:
            UUID or int, or None for unsupported key types

        Examples:
            >>> gen = KeyGenerator("Order")
            >>> gen.generate(PropertySchema("Id", "int", is_key=True), 0)
            1
        """
        canonical = key_property.canonical_type
        if canonical == "Guid":
            return deterministic_guid(self.entity_name, index, self.salt)
        if canonical in INTEGER_KEY_TYPES:
            return index + 1
        return None
