import copy as _copy
import sys
import warnings

import numpy as np
import polars as pl
import scipy.sparse as sp

from ..errors import (
    DuplicateVertex,
    EdgeAlreadyExists,
    EdgeNotFound,
    InvalidDimension,
    UnknownVertex,
)
from ._helpers import _as_float, _as_index, _edge_mask, _is_no_edge
from ._History import History
from ._IndexManager import IndexManager
from .matrix import DenseMatrix

# ===================================


class Graph(History):
    """Weighted graph over named vertices, backed by a dense adjacency matrix.

    Vertex ``i`` owns row ``i`` and column ``i`` of a square ``DenseMatrix``;
    cell ``(i, j)`` holds the weight of the edge ``i -> j``. A cell equal to
    ``no_edge_value`` means there is no edge, so the matrix fill value and the
    sentinel are the same number.

    Parameters
    --
    directed : bool
        If False, every edge write is mirrored to ``(j, i)``.
    no_edge_value : float, optional
        Sentinel meaning "no edge".
    capacity : int, optional
        Number of vertices to pre-size the adjacency buffer for.

    Notes
    -
    - Vertex indices are always ``0..order-1``. Removing a vertex deletes its
      row and column, then rebuilds the whole name -> index map.
    - An edge written with a weight equal to ``no_edge_value`` cannot be told
      apart from a missing edge.
    - ``add_edge``/``remove_edge``/``get_edge_weight`` only inspect the forward
      cell ``(source, destination)``. ``set_edge_weight`` does not check for an
      existing edge at all and may create or erase one.
    - Failing calls raise before any state is touched.
    - A NaN ``no_edge_value`` departs from plain ``!=`` on purpose: under
      ``!=`` every cell would read as an edge, so absence is tested with
      ``isnan`` instead and NaN marks empty cells.

    See Also

    add_vertex, add_edge, get_neighbors, vertices_view, edges_view

    """

    def __init__(self, directed: bool, no_edge_value: float = 0.0, *, capacity: int = 0):
        self._directed = bool(directed)

        # Adjacency store; its fill value doubles as the sentinel
        self._matrix = DenseMatrix(0, 0, _as_float(no_edge_value, "no_edge_value"))
        self._no_edge_value = self._matrix.fill_value

        capacity = _as_index(capacity)
        if capacity < 0:
            raise InvalidDimension(f"capacity must be non-negative, got {capacity}")
        if capacity:
            self._matrix.reserve(capacity, capacity)

        # Vertex tables, kept parallel to the matrix rows
        self._vertex_indices = {}  # name -> index
        self._vertex_names = []  # index -> name
        self._vertex_values = []  # index -> value

        self.idx = IndexManager(self)

        # History and Timeline
        self._init_history()

    # Properties

    @property
    def order(self) -> int:
        """Number of vertices."""
        return len(self._vertex_names)

    @property
    def directed(self) -> bool:
        return self._directed

    @property
    def no_edge_value(self) -> float:
        return self._no_edge_value

    @property
    def matrix(self) -> DenseMatrix:
        """The adjacency store. Owned by the graph; treat as read-only."""
        return self._matrix

    def __len__(self) -> int:
        return len(self._vertex_names)

    def __contains__(self, name) -> bool:
        return name in self._vertex_indices

    def __iter__(self):
        return iter(list(self._vertex_names))

    def __repr__(self):
        kind = "directed" if self._directed else "undirected"
        return f"Graph({kind}, order={self.order}, edges={self.number_of_edges()}, no_edge_value={self._no_edge_value!r})"

    # Lookups

    def _index_of(self, name) -> int:
        try:
            return self._vertex_indices[name]
        except KeyError:
            raise UnknownVertex(f"vertex '{name}' not found") from None

    def _endpoints(self, source, destination) -> tuple[int, int]:
        return self._index_of(source), self._index_of(destination)

    def _rebuild_index(self):
        self._vertex_indices = {name: i for i, name in enumerate(self._vertex_names)}

    # Vertices

    def add_vertex(self, name: str, value: float = 0.0) -> int:
        """Append a vertex.

        Parameters
        --
        name : str
            Unique vertex name.
        value : float, optional
            Scalar attached to the vertex.

        Returns
        ---
        int
            The new vertex index (the order before the call).

        Raises
        --
        DuplicateVertex
            If ``name`` is already present.

        """
        if not isinstance(name, str):
            raise TypeError(f"vertex name must be str, got {type(name).__name__}")
        if name in self._vertex_indices:
            raise DuplicateVertex(f"vertex '{name}' already exists")
        value = _as_float(value, "value")

        idx = self.order
        self._matrix.insert_row(idx)
        self._matrix.insert_column(idx)

        self._vertex_indices[name] = idx
        self._vertex_names.append(name)
        self._vertex_values.append(value)
        return idx

    def remove_vertex(self, name: str):
        """Remove a vertex and every edge touching it.

        Later vertices shift down by one index; the name -> index map is
        rebuilt from the compacted name list.

        Raises
        --
        UnknownVertex
            If ``name`` is not present.

        """
        idx = self._index_of(name)

        self._matrix.remove_row(idx)
        self._matrix.remove_column(idx)

        del self._vertex_names[idx]
        del self._vertex_values[idx]
        self._rebuild_index()

    def get_vertex_value(self, name: str) -> float:
        return self._vertex_values[self._index_of(name)]

    def set_vertex_value(self, name: str, value: float):
        idx = self._index_of(name)
        self._vertex_values[idx] = _as_float(value, "value")

    def has_vertex(self, name) -> bool:
        return name in self._vertex_indices

    def vertices(self) -> list[str]:
        """Vertex names in index order."""
        return list(self._vertex_names)

    def get_vertex(self, index: int) -> str:
        """Return the vertex name stored at ``index``."""
        return self.idx.row_to_vertex(index)

    def vertex_index(self, name: str) -> int:
        return self._index_of(name)

    # Neighborhoods

    def get_neighbors(self, name: str) -> list[str]:
        """Names of the vertices ``name`` has an edge to, in index order.

        On a directed graph this is the successor list only.

        Raises
        --
        UnknownVertex
            If ``name`` is not present.

        """
        row = self._matrix.row(self._index_of(name))
        names = self._vertex_names
        return [names[j] for j in np.flatnonzero(_edge_mask(row, self._no_edge_value))]

    def in_neighbors(self, name: str) -> list[str]:
        """Names of the vertices with an edge to ``name``, in index order."""
        col = self._matrix.column(self._index_of(name))
        names = self._vertex_names
        return [names[i] for i in np.flatnonzero(_edge_mask(col, self._no_edge_value))]

    def degree(self, name: str) -> int:
        """Out-degree (plain degree on undirected graphs); self-loops count once."""
        return len(self.get_neighbors(name))

    # Edges

    def add_edge(self, source: str, destination: str, weight: float = 1.0):
        """Add the edge ``source -> destination``.

        On an undirected graph the mirrored cell gets the same weight. Only the
        forward cell is checked for an existing edge.

        Raises
        --
        UnknownVertex
            If either endpoint is not present.
        EdgeAlreadyExists
            If the forward cell already holds an edge.

        """
        i, j = self._endpoints(source, destination)
        weight = _as_float(weight, "weight")
        if not _is_no_edge(self._matrix.get(i, j), self._no_edge_value):
            raise EdgeAlreadyExists(f"edge '{source}' -> '{destination}' already exists")

        self._write_edge(i, j, weight)

        if _is_no_edge(self._matrix.get(i, j), self._no_edge_value):
            warnings.warn(
                f"edge '{source}' -> '{destination}' was written with the no-edge value "
                f"{self._no_edge_value!r}; it reads as absent",
                UserWarning,
                stacklevel=3,
            )

    def remove_edge(self, source: str, destination: str):
        """Remove the edge ``source -> destination`` (and its mirror if undirected).

        Raises
        --
        UnknownVertex
            If either endpoint is not present.
        EdgeNotFound
            If the forward cell holds no edge.

        """
        i, j = self._endpoints(source, destination)
        if _is_no_edge(self._matrix.get(i, j), self._no_edge_value):
            raise EdgeNotFound(f"edge '{source}' -> '{destination}' not found")
        self._write_edge(i, j, self._no_edge_value)

    def get_edge_weight(self, source: str, destination: str) -> float:
        i, j = self._endpoints(source, destination)
        w = self._matrix.get(i, j)
        if _is_no_edge(w, self._no_edge_value):
            raise EdgeNotFound(f"edge '{source}' -> '{destination}' not found")
        return w

    def set_edge_weight(self, source: str, destination: str, weight: float):
        """Write ``weight`` on ``source -> destination`` whether or not the edge exists.

        Writing ``no_edge_value`` erases the edge; writing anything else on an
        empty cell creates one. Mirrored on undirected graphs.

        Raises
        --
        UnknownVertex
            If either endpoint is not present.

        """
        i, j = self._endpoints(source, destination)
        self._write_edge(i, j, _as_float(weight, "weight"))

    def _write_edge(self, i: int, j: int, weight: float):
        self._matrix.set(i, j, weight)
        if not self._directed:
            self._matrix.set(j, i, weight)

    def has_edge(self, source, destination) -> bool:
        """True if both endpoints exist and the forward cell holds an edge."""
        if source not in self._vertex_indices or destination not in self._vertex_indices:
            return False
        i, j = self._endpoints(source, destination)
        return not _is_no_edge(self._matrix.get(i, j), self._no_edge_value)

    def _edge_cells(self):
        data = self._matrix.to_numpy()
        mask = _edge_mask(data, self._no_edge_value)
        if not self._directed:
            # mirrored pairs once
            mask = np.triu(mask)
        rows, cols = np.nonzero(mask)
        return data, rows, cols

    def edges(self) -> list[tuple[str, str, float]]:
        """``(source, destination, weight)`` triples in row-major order.

        Undirected graphs report each mirrored pair once, as ``i <= j``.
        """
        data, rows, cols = self._edge_cells()
        names = self._vertex_names
        return [(names[r], names[c], float(data[r, c])) for r, c in zip(rows, cols)]

    def number_of_edges(self) -> int:
        return len(self._edge_cells()[1])

    # Views

    def vertices_view(self) -> pl.DataFrame:
        """Vertex table.

        Returns
        ---
        polars.DataFrame
            Columns: ``vertex``, ``index``, ``value``; one row per vertex in index order.

        """
        return pl.DataFrame(
            {
                "vertex": list(self._vertex_names),
                "index": list(range(self.order)),
                "value": list(self._vertex_values),
            },
            schema={"vertex": pl.Utf8, "index": pl.Int64, "value": pl.Float64},
        )

    def edges_view(self) -> pl.DataFrame:
        """Edge table.

        Returns
        ---
        polars.DataFrame
            Columns: ``source``, ``target``, ``weight``; same rows as ``edges()``.

        """
        triples = self.edges()
        return pl.DataFrame(
            {
                "source": [s for s, _, _ in triples],
                "target": [t for _, t, _ in triples],
                "weight": [w for _, _, w in triples],
            },
            schema={"source": pl.Utf8, "target": pl.Utf8, "weight": pl.Float64},
        )

    def adjacency_matrix(self, sparse: bool = False):
        """Return a copy of the adjacency store.

        Parameters
        --
        sparse : bool, optional (default=False)
            - If `True`, return a SciPy CSR matrix holding only the edge cells
              (explicit entries, even when a weight is zero).
            - If `False`, return the dense NumPy ndarray, sentinel cells included.

        Returns
        ---
        scipy.sparse.csr_matrix | numpy.ndarray

        """
        if not sparse:
            return self._matrix.to_numpy()
        data = self._matrix.to_numpy()
        rows, cols = np.nonzero(_edge_mask(data, self._no_edge_value))
        n = self.order
        return sp.csr_matrix((data[rows, cols], (rows, cols)), shape=(n, n), dtype=data.dtype)

    # Copy

    def copy(self, history: bool = False) -> "Graph":
        """Deep copy of the graph.

        Parameters
        ----------
        history : bool
            If True, copy the mutation history and snapshot timeline.
            If False, the new graph starts with a clean history.
        """
        new = Graph(self._directed, self._no_edge_value)
        new._matrix = self._matrix.copy()
        new._vertex_names = list(self._vertex_names)
        new._vertex_values = list(self._vertex_values)
        new._vertex_indices = dict(self._vertex_indices)
        if history:
            new._history = [dict(evt) for evt in self._history]
            new._version = self._version
            new._snapshots = _copy.deepcopy(self._snapshots)
            new._history_enabled = self._history_enabled
        return new

    # history hooks are bound to the instance, so copies must go through copy()
    def __copy__(self):
        return self.copy(history=True)

    def __deepcopy__(self, memo):
        new = self.copy(history=True)
        memo[id(self)] = new
        return new

    # Diagnostic dump

    def format(self) -> str:
        """Adjacency table: a header of vertex names, then one line per vertex."""
        if not self._vertex_names:
            return ""
        lines = ["\t" + "\t".join(self._vertex_names)]
        body = self._matrix.format().split("\n")
        lines.extend(f"{name}\t{cells}" for name, cells in zip(self._vertex_names, body))
        return "\n".join(lines)

    def print(self, file=None):
        out = sys.stdout if file is None else file
        text = self.format()
        if text:
            out.write(text + "\n")
