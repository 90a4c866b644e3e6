"""Custom exceptions with helpful error messages."""


class RelseedError(Exception):
    """Base exception for relseed errors."""

    pass


class ParentCycleError(RelseedError):
    """Entity configs reference each other as parents in a loop."""

    def __init__(self, entities: list[str]):
        self.entities = entities
        chain = " -> ".join(entities)
        super().__init__(
            f"Parent cycle detected in entity configuration: {chain}\n\n"
            f"Suggestions:\n"
            f"1. Remove the parent link from one of the entities in the chain\n"
            f"2. Give the root entity a direct record count instead of a parent"
        )


class UnknownEntityError(RelseedError):
    """Entity name does not exist in the schema graph."""

    def __init__(self, entity: str, available: list[str]):
        self.entity = entity
        names = ", ".join(available) or "(none)"
        super().__init__(
            f"Entity '{entity}' not found in schema.\n\n"
            f"Suggestions:\n"
            f"1. Check entity name spelling\n"
            f"2. Available entities: {names}"
        )


class ProjectFileError(RelseedError):
    """Project file (schema + seed configuration) could not be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(
            f"Could not load project file '{path}': {reason}\n\n"
            f"Suggestions:\n"
            f"1. Check the file is valid YAML or JSON\n"
            f"2. Every entity needs a 'name' and a 'properties' list\n"
            f"3. Every property needs a 'name' and a 'type'"
        )
