"""Import graph of the files visited during one resolution request."""

from typing import Dict, List
import networkx as nx


class ImportGraph:
    """Directed graph of file-to-file import edges."""

    def __init__(self) -> None:
        self.graph = nx.DiGraph()

    def add_file(self, path: str, **attrs) -> None:
        """Add a file node."""
        self.graph.add_node(path, **attrs)

    def add_import(self, importer: str, dependency: str, specifier: str) -> None:
        """Add an import edge from importer to dependency."""
        self.graph.add_edge(importer, dependency, specifier=specifier)

    def cycle_through(self, importer: str, dependency: str) -> List[str]:
        """Get the import chain that closes a cycle via importer -> dependency.

        Returns:
            Paths starting and ending at dependency, or an empty list when
            the edge does not close a cycle
        """
        if dependency not in self.graph or importer not in self.graph:
            return []
        try:
            path = nx.shortest_path(self.graph, dependency, importer)
        except nx.NetworkXNoPath:
            return []
        return path + [dependency]

    def transitive_dependencies(self, path: str) -> List[str]:
        if path not in self.graph:
            return []
        return sorted(nx.descendants(self.graph, path))

    def get_stats(self) -> Dict[str, int]:
        """Get graph statistics."""
        return {
            "files": self.graph.number_of_nodes(),
            "imports": self.graph.number_of_edges(),
        }
