import sys

import numpy as np

from ..errors import IndexOutOfRange, InvalidDimension
from ._helpers import _as_index


class DenseMatrix:
    """Dense 2-D float container with row/column insertion and removal.

    The cells live in a single NumPy buffer that is allowed to be larger than
    the logical shape; only ``[:n_rows, :n_columns]`` is meaningful. Appending a
    row or a column grows the buffer geometrically, so building a matrix one
    row/column at a time stays cheap.

    Parameters
    --
    n_rows, n_columns : int, optional
        Initial dimensions. Negative values raise ``InvalidDimension``.
    fill_value : float, optional
        Value written into every newly created cell.

    Notes
    -
    - The column count is tracked on its own so a matrix with zero rows still
      knows how wide its future rows are.
    - Every failing call raises before touching the buffer.

    """

    def __init__(self, n_rows: int = 0, n_columns: int = 0, fill_value: float = 0.0):
        n_rows = _as_index(n_rows)
        n_columns = _as_index(n_columns)
        if n_rows < 0 or n_columns < 0:
            raise InvalidDimension(f"dimensions must be non-negative, got ({n_rows}, {n_columns})")

        self._fill_value = float(fill_value)
        self._data = np.full((n_rows, n_columns), self._fill_value, dtype=np.float64)
        self._n_rows = n_rows
        self._n_columns = n_columns

    # Properties

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def n_columns(self) -> int:
        return self._n_columns

    @property
    def shape(self) -> tuple[int, int]:
        return (self._n_rows, self._n_columns)

    @property
    def fill_value(self) -> float:
        """Value used for every newly created cell."""
        return self._fill_value

    @property
    def capacity(self) -> tuple[int, int]:
        """Allocated (rows, columns) of the backing buffer."""
        return self._data.shape

    def __len__(self) -> int:
        return self._n_rows

    # Capacity

    def reserve(self, n_rows: int, n_columns: int):
        """Pre-size the buffer so the matrix can reach ``(n_rows, n_columns)`` without reallocating."""
        self._resize_buffer(max(_as_index(n_rows), self._data.shape[0]),
                            max(_as_index(n_columns), self._data.shape[1]))

    def _resize_buffer(self, rows: int, cols: int):
        if (rows, cols) == self._data.shape:
            return
        new = np.full((rows, cols), self._fill_value, dtype=np.float64)
        new[: self._n_rows, : self._n_columns] = self._data[: self._n_rows, : self._n_columns]
        self._data = new

    def _grow_rows_to(self, target: int):
        rows, cols = self._data.shape
        if target > rows:
            # geometric bump, minimum step 8
            self._resize_buffer(max(target, rows + max(8, rows >> 1)), cols)

    def _grow_cols_to(self, target: int):
        rows, cols = self._data.shape
        if target > cols:
            self._resize_buffer(rows, max(target, cols + max(8, cols >> 1)))

    # Bounds checks

    @staticmethod
    def _check_position(pos, upper: int, what: str) -> int:
        # insertion positions may equal `upper` (append)
        pos = _as_index(pos)
        if pos < 0 or pos > upper:
            raise IndexOutOfRange(f"{what} position {pos} out of range [0, {upper}]")
        return pos

    @staticmethod
    def _check_index(idx, size: int, what: str) -> int:
        idx = _as_index(idx)
        if idx < 0 or idx >= size:
            raise IndexOutOfRange(f"{what} index {idx} out of range [0, {size})")
        return idx

    def _check_cell(self, i, j) -> tuple[int, int]:
        return (
            self._check_index(i, self._n_rows, "row"),
            self._check_index(j, self._n_columns, "column"),
        )

    # Structural edits

    def insert_row(self, i: int):
        """Insert a row of ``fill_value`` at position ``i``.

        Rows at positions ``>= i`` shift down by one. ``i == n_rows`` appends.

        Raises
        --
        IndexOutOfRange
            If ``i`` is outside ``[0, n_rows]``.

        """
        n, nc = self._n_rows, self._n_columns
        i = self._check_position(i, n, "row")
        self._grow_rows_to(n + 1)
        d = self._data
        if i < n:
            d[i + 1 : n + 1, :nc] = d[i:n, :nc].copy()
        d[i, :nc] = self._fill_value
        self._n_rows = n + 1

    def insert_column(self, j: int):
        """Insert a column of ``fill_value`` at position ``j``.

        Touches every row. ``j == n_columns`` appends.

        Raises
        --
        IndexOutOfRange
            If ``j`` is outside ``[0, n_columns]``.

        """
        nr, n = self._n_rows, self._n_columns
        j = self._check_position(j, n, "column")
        self._grow_cols_to(n + 1)
        d = self._data
        if j < n:
            d[:nr, j + 1 : n + 1] = d[:nr, j:n].copy()
        d[:nr, j] = self._fill_value
        self._n_columns = n + 1

    def remove_row(self, i: int):
        """Remove row ``i``; later rows shift up by one."""
        n, nc = self._n_rows, self._n_columns
        i = self._check_index(i, n, "row")
        d = self._data
        if i < n - 1:
            d[i : n - 1, :nc] = d[i + 1 : n, :nc].copy()
        d[n - 1, :nc] = self._fill_value
        self._n_rows = n - 1

    def remove_column(self, j: int):
        """Remove column ``j`` from every row; later columns shift left by one."""
        nr, n = self._n_rows, self._n_columns
        j = self._check_index(j, n, "column")
        d = self._data
        if j < n - 1:
            d[:nr, j : n - 1] = d[:nr, j + 1 : n].copy()
        d[:nr, n - 1] = self._fill_value
        self._n_columns = n - 1

    # Cell access

    def get(self, i: int, j: int) -> float:
        """Return the value at row ``i``, column ``j``."""
        i, j = self._check_cell(i, j)
        return float(self._data[i, j])

    def set(self, i: int, j: int, value: float):
        """Write ``value`` at row ``i``, column ``j``."""
        i, j = self._check_cell(i, j)
        self._data[i, j] = float(value)

    def __getitem__(self, key):
        i, j = key
        return self.get(i, j)

    def __setitem__(self, key, value):
        i, j = key
        self.set(i, j, value)

    def row(self, i: int) -> np.ndarray:
        """Copy of row ``i``."""
        i = self._check_index(i, self._n_rows, "row")
        return self._data[i, : self._n_columns].copy()

    def column(self, j: int) -> np.ndarray:
        """Copy of column ``j``."""
        j = self._check_index(j, self._n_columns, "column")
        return self._data[: self._n_rows, j].copy()

    # Conversion

    def to_numpy(self) -> np.ndarray:
        """Copy of the logical region as a 2-D ndarray."""
        return self._data[: self._n_rows, : self._n_columns].copy()

    def copy(self) -> "DenseMatrix":
        new = DenseMatrix(0, 0, self._fill_value)
        new._data = self._data.copy()
        new._n_rows = self._n_rows
        new._n_columns = self._n_columns
        return new

    def __eq__(self, other):
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        same_fill = self._fill_value == other._fill_value or (
            np.isnan(self._fill_value) and np.isnan(other._fill_value)
        )
        return (
            self.shape == other.shape
            and same_fill
            and np.array_equal(self.to_numpy(), other.to_numpy(), equal_nan=True)
        )

    __hash__ = None

    def __repr__(self):
        return (
            f"DenseMatrix(n_rows={self._n_rows}, n_columns={self._n_columns}, "
            f"fill_value={self._fill_value!r})"
        )

    # Diagnostic dump

    def format(self) -> str:
        """Tab-separated rows in index order, one line per row."""
        return "\n".join(
            "\t".join(f"{v:g}" for v in self._data[i, : self._n_columns])
            for i in range(self._n_rows)
        )

    def print(self, file=None):
        """Write ``format()`` to ``file`` (stdout by default)."""
        out = sys.stdout if file is None else file
        if self._n_rows:
            out.write(self.format() + "\n")
