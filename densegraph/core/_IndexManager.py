from ..errors import IndexOutOfRange, UnknownVertex
from ._helpers import _as_index


class IndexManager:
    """Namespace for index operations.
    Provides a read-only API over the graph's name/index tables.
    """

    def __init__(self, graph):
        self._G = graph

    # ==================== Vertex Indexes ====================

    def vertex_to_row(self, name):
        """Map vertex name to matrix row (and column) index."""
        if name not in self._G._vertex_indices:
            raise UnknownVertex(f"vertex '{name}' not found")
        return self._G._vertex_indices[name]

    def row_to_vertex(self, row):
        """Map matrix row index to vertex name."""
        names = self._G._vertex_names
        row = _as_index(row)
        if row < 0 or row >= len(names):
            raise IndexOutOfRange(f"row {row} out of range [0, {len(names)})")
        return names[row]

    def vertices_to_rows(self, names):
        """Batch convert vertex names to row indices."""
        return [self.vertex_to_row(n) for n in names]

    def rows_to_vertices(self, rows):
        """Batch convert row indices to vertex names."""
        return [self.row_to_vertex(r) for r in rows]

    # ==================== Utilities ====================

    def has_vertex(self, name) -> bool:
        return name in self._G._vertex_indices

    def vertex_count(self) -> int:
        """Number of vertices (rows == columns of the adjacency store)."""
        return len(self._G._vertex_names)

    def is_contiguous(self) -> bool:
        """True if every name maps to its position in the name list."""
        G = self._G
        return len(G._vertex_indices) == len(G._vertex_names) and all(
            G._vertex_indices.get(n) == i for i, n in enumerate(G._vertex_names)
        )

    def stats(self):
        """Get index statistics."""
        G = self._G
        rows, cols = G.matrix.shape
        return {
            "n_vertices": len(G._vertex_names),
            "n_rows": rows,
            "n_columns": cols,
            "capacity": G.matrix.capacity,
            "max_row": len(G._vertex_names) - 1,
        }
