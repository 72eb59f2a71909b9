"""Row-major matrix view over caller-owned numeric storage.

The rotation code works on small dense matrices laid out in flat buffers
(a batch of N row vectors is an N x 3 matrix). ``Matrix`` wraps such a
buffer together with its dimensions without ever copying or owning it.
"""

from __future__ import annotations

import numpy as np

from .errors import DimensionMismatchError, NonSquareMatrixError


class Matrix:
    """A rows x cols view over a contiguous floating point buffer.

    Attributes:
        data: The caller-supplied buffer. Only its first rows*cols elements
            (in C order) are used.
        rows: Number of rows.
        cols: Number of columns.
    """

    def __init__(self, data: np.ndarray, rows: int, cols: int):
        if rows < 0 or cols < 0:
            raise ValueError(f"Invalid matrix shape {rows}x{cols}")
        if not isinstance(data, np.ndarray) or not np.issubdtype(data.dtype, np.floating):
            raise ValueError("Matrix buffer must be a floating point numpy array")
        if not data.flags.c_contiguous:
            raise ValueError("Matrix buffer must be C-contiguous")
        if data.size < rows * cols:
            raise ValueError(
                f"Buffer of {data.size} elements is too small for a {rows}x{cols} matrix"
            )
        self.data = data
        self.rows = rows
        self.cols = cols

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols})"

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    @property
    def values(self) -> np.ndarray:
        """A (rows, cols) view into the backing buffer."""
        flat = self.data.reshape(-1)
        return flat[: self.rows * self.cols].reshape(self.rows, self.cols)

    @staticmethod
    def multiply(a: Matrix, b: Matrix, result: Matrix) -> None:
        """Store the matrix product ``a @ b`` into ``result``.

        ``result`` must not share storage with ``a`` or ``b``.

        Args:
            a: Left operand (m x k).
            b: Right operand (k x n).
            result: Destination view (m x n), caller allocated.

        Raises:
            DimensionMismatchError: If the inner dimensions differ or the
                result view has the wrong shape. Nothing is written.
        """
        if a.cols != b.rows:
            raise DimensionMismatchError(
                f"Cannot multiply {a.rows}x{a.cols} by {b.rows}x{b.cols}"
            )
        if result.rows != a.rows or result.cols != b.cols:
            raise DimensionMismatchError(
                f"Result is {result.rows}x{result.cols}, expected {a.rows}x{b.cols}"
            )
        np.matmul(a.values, b.values, out=result.values)

    def transpose(self) -> None:
        """Transpose a square matrix in place.

        Raises:
            NonSquareMatrixError: If rows != cols. Use :meth:`transposed`
                for rectangular shapes.
        """
        if not self.is_square:
            raise NonSquareMatrixError(
                f"In-place transpose needs a square matrix, got {self.rows}x{self.cols}"
            )
        m = self.values
        for r in range(self.rows):
            for c in range(r + 1, self.cols):
                m[r, c], m[c, r] = m[c, r], m[r, c]

    def transposed(self, out: Matrix) -> Matrix:
        """Write the transpose of this matrix into ``out`` and return it.

        Raises:
            DimensionMismatchError: If ``out`` is not cols x rows.
        """
        if out.rows != self.cols or out.cols != self.rows:
            raise DimensionMismatchError(
                f"Transpose of {self.rows}x{self.cols} needs a "
                f"{self.cols}x{self.rows} destination, got {out.rows}x{out.cols}"
            )
        out.values[...] = self.values.T
        return out
