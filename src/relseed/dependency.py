"""Entity dependency graph and generation order."""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from relseed.models import EntitySchema

logger = logging.getLogger(__name__)


@dataclass
class DependencyOrder:
    """
    Resolved generation order.

    Attributes:
        order: Entity names, referenced entities before their dependents
        cycles: Cycles that had to be broken, one list of names per break
    """

    order: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return len(self.cycles) > 0


class DependencyGraph:
    """
    Directed graph of entity dependencies based on foreign keys.

    Entities keep their declaration position; ties between entities that
    are ready at the same time are broken by that position.
    """

    def __init__(self) -> None:
        self._positions: dict[str, int] = {}
        self._edges: dict[str, set[str]] = {}  # entity -> dependencies
        self._reverse_edges: dict[str, set[str]] = {}  # entity -> dependents

    @property
    def entities(self) -> list[str]:
        """Entity names in declaration order."""
        return sorted(self._positions, key=self._positions.__getitem__)

    def add_entity(self, name: str) -> None:
        """Add an entity node (no-op if already present)."""
        if name in self._positions:
            return
        self._positions[name] = len(self._positions)
        self._edges[name] = set()
        self._reverse_edges[name] = set()

    def has_entity(self, name: str) -> bool:
        return name in self._positions

    def add_dependency(self, entity: str, depends_on: str) -> None:
        """
        Add a dependency edge: entity depends on depends_on.

        Self-references and edges to unknown entities are not ordering
        constraints and are ignored.
        """
        if entity == depends_on:
            return
        if entity not in self._positions or depends_on not in self._positions:
            logger.debug(f"Ignoring dependency {entity} -> {depends_on}: not in graph")
            return
        self._edges[entity].add(depends_on)
        self._reverse_edges[depends_on].add(entity)

    def get_dependencies(self, entity: str) -> list[str]:
        """Get the entities this entity depends on, in declaration order."""
        return sorted(self._edges.get(entity, set()), key=self._positions.__getitem__)

    def topological_sort(self) -> DependencyOrder:
        """
        Order entities with Kahn's algorithm.

        When every remaining entity still waits on another one, a cycle is
        located among them and its member declared first is emitted anyway.
        Entities that merely wait on the cycle stay behind it. The cycle is
        recorded and sorting continues. This never raises.

        Returns:
            Resolved order and broken cycles
        """
        in_degree = {name: len(deps) for name, deps in self._edges.items()}
        ready = [(pos, name) for name, pos in self._positions.items() if in_degree[name] == 0]
        heapq.heapify(ready)

        result = DependencyOrder()
        done: set[str] = set()

        while len(done) < len(self._positions):
            if ready:
                _, name = heapq.heappop(ready)
                if name in done:
                    continue
            else:
                start = min(
                    (n for n in self._positions if n not in done),
                    key=self._positions.__getitem__,
                )
                cycle = self._find_cycle(start, done)
                name = start
                if len(cycle) > 1:
                    members = cycle[:-1]
                    name = min(members, key=self._positions.__getitem__)
                    pivot = members.index(name)
                    cycle = members[pivot:] + members[:pivot] + [name]
                result.cycles.append(cycle)
                logger.warning(
                    f"Circular dependency between {' -> '.join(cycle)}; "
                    f"generating '{name}' before its dependencies"
                )

            done.add(name)
            result.order.append(name)

            for dependent in self._reverse_edges[name]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0 and dependent not in done:
                    heapq.heappush(ready, (self._positions[dependent], dependent))

        return result

    def _find_cycle(self, start: str, done: set[str]) -> list[str]:
        """Find a cycle reachable from start among entities not yet emitted."""
        path: list[str] = []
        on_path: set[str] = set()
        visited: set[str] = set()

        def dfs(node: str) -> Optional[list[str]]:
            path.append(node)
            on_path.add(node)
            visited.add(node)
            for dep in self.get_dependencies(node):
                if dep in done:
                    continue
                if dep in on_path:
                    return path[path.index(dep) :] + [dep]
                if dep not in visited:
                    found = dfs(dep)
                    if found:
                        return found
            path.pop()
            on_path.discard(node)
            return None

        return dfs(start) or [start]


def resolve_dependency_order(
    entities: list[EntitySchema],
    extra_edges: Iterable[tuple[str, str]] = (),
) -> DependencyOrder:
    """
    Resolve the order in which entities must be generated.

    Every entity referenced through a foreign key comes before the entity
    holding the key. Self-references and references to entities outside
    ``entities`` do not constrain the order.

    Args:
        entities: Entity schemas in declaration order
        extra_edges: Additional (dependent, dependency) pairs, e.g. parent
            links from entity configs

    Returns:
        Resolved order and any cycles that were broken

    Example:
        >>> author = EntitySchema("Author")
        >>> book = EntitySchema("Book", properties=[
        ...     PropertySchema("AuthorId", "int", is_foreign_key=True,
        ...                    foreign_key_target_entity="Author")])
        >>> resolve_dependency_order([book, author]).order
        ['Author', 'Book']
    """
    graph = DependencyGraph()
    for entity in entities:
        graph.add_entity(entity.name)

    for entity in entities:
        for target in entity.get_dependent_entity_names():
            graph.add_dependency(entity.name, target)

    for dependent, dependency in extra_edges:
        graph.add_dependency(dependent, dependency)

    return graph.topological_sort()
