"""
Definition dependency model classes.

This module models which definitions reference which, so the compiler can
build definitions in dependency order and reject definitions that reach
themselves without consuming any input.
"""

from typing import Dict, Generic, List, Set, TypeVar

# Type variable for the node class
T = TypeVar('T')


class DependencyNode(Generic[T]):
    """
    A node in a dependency graph.

    Each node contains an item and its dependencies.
    """

    def __init__(self, item: T, key: str):
        """
        Initialize a new dependency node.

        Args:
            item: The item this node contains
            key: A unique identifier for this node
        """
        self.item = item
        self.key = key
        self.dependencies: Set[DependencyNode[T]] = set()
        self.dependents: Set[DependencyNode[T]] = set()

    def add_dependency(self, node: 'DependencyNode[T]') -> None:
        """
        Add a dependency to this node.

        Args:
            node: Node this node depends on
        """
        if node not in self.dependencies:
            self.dependencies.add(node)
            node.dependents.add(self)

    def __repr__(self) -> str:
        return f"DependencyNode(key={self.key}, dependencies={len(self.dependencies)})"


class DependencyGraph(Generic[T]):
    """
    A graph representing dependency relationships between items.
    """

    def __init__(self):
        self.nodes: Dict[str, DependencyNode[T]] = {}

    def add_node(self, item: T, key: str) -> DependencyNode[T]:
        """
        Add a node to the graph.

        Args:
            item: The item to add
            key: A unique identifier for the node

        Returns:
            The created (or already present) node
        """
        if key in self.nodes:
            return self.nodes[key]

        node = DependencyNode(item, key)
        self.nodes[key] = node
        return node

    def add_dependency(self, dependent_key: str, dependency_key: str) -> None:
        """
        Add a dependency relationship between two nodes.

        Args:
            dependent_key: Key of the dependent node
            dependency_key: Key of the dependency node
        """
        if dependent_key not in self.nodes or dependency_key not in self.nodes:
            return

        dependent = self.nodes[dependent_key]
        dependency = self.nodes[dependency_key]
        dependent.add_dependency(dependency)

    def topological_sort(self) -> List[T]:
        """
        Sort the items in topological order.

        Nodes on a cycle are emitted once, in visit order.

        Returns:
            List of items, dependencies first
        """
        result: List[T] = []
        visited: Set[str] = set()
        temp_visited: Set[str] = set()

        def visit(node: DependencyNode[T]) -> None:
            if node.key in visited or node.key in temp_visited:
                return

            temp_visited.add(node.key)
            for dependency in sorted(node.dependencies, key=lambda n: n.key):
                visit(dependency)
            temp_visited.remove(node.key)
            visited.add(node.key)
            result.append(node.item)

        for node in self.nodes.values():
            if node.key not in visited:
                visit(node)

        return result

    def find_cycles(self) -> List[List[str]]:
        """
        Find the elementary cycles reachable in the graph.

        Each cycle is reported once, rotated so it starts at its smallest key.

        Returns:
            Lists of node keys, one per cycle
        """
        cycles: List[List[str]] = []
        seen: Set[tuple] = set()

        def visit(node: DependencyNode[T], stack: List[str]) -> None:
            if node.key in stack:
                cycle = stack[stack.index(node.key):]
                start = cycle.index(min(cycle))
                rotated = tuple(cycle[start:] + cycle[:start])
                if rotated not in seen:
                    seen.add(rotated)
                    cycles.append(list(rotated))
                return
            stack.append(node.key)
            for dependency in sorted(node.dependencies, key=lambda n: n.key):
                visit(dependency, stack)
            stack.pop()

        for node in self.nodes.values():
            visit(node, [])

        return cycles


class DefinitionGraph:
    """
    Reference graph between schema definitions.

    Two edge kinds are tracked: every reference (for build order) and
    references reached only through wrapper nodes, which never consume input.
    """

    def __init__(self):
        self.references = DependencyGraph[str]()
        self.wrapper_references = DependencyGraph[str]()

    def add_definition(self, name: str) -> None:
        self.references.add_node(name, name)
        self.wrapper_references.add_node(name, name)

    def add_reference(self, source: str, target: str, through_wrappers_only: bool) -> None:
        """
        Record that definition ``source`` references ``target``.

        Args:
            source: Referencing definition
            target: Referenced definition
            through_wrappers_only: No input-consuming node lies between them
        """
        self.references.add_dependency(source, target)
        if through_wrappers_only:
            self.wrapper_references.add_dependency(source, target)

    def build_order(self) -> List[str]:
        return self.references.topological_sort()

    def wrapper_cycles(self) -> List[List[str]]:
        return self.wrapper_references.find_cycles()
