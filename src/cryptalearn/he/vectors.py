"""
Vector and matrix operations over Paillier ciphertexts.

Real-valued inputs go through a FixedPointEncoder (see encoding.py); the
resulting EncryptedVector / EncryptedMatrix records the scale carried by its
plaintexts so decryption can undo it. Products with encoded plaintext
weights multiply the scale.

Cost notes:
    - encrypt_*/decrypt_*: one modular exponentiation pair per element
    - inner_product: one exponentiation per element plus one encryption
    - matrix_mult: rows * cols * inner exponentiations, the most expensive
      operation in the engine. Pass a BatchEngine to spread the output cells
      over its workers for anything beyond small matrices.
    - matrix_transpose: no cryptographic cost
"""

from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import DimensionMismatchError, EncodingError
from ..logging import get_logger
from .cipher import Ciphertext, add, decrypt, encrypt, mult
from .encoding import FixedPointEncoder, decode_residue
from .keys import PrivateKey, PublicKey

if TYPE_CHECKING:
    from .batch import BatchEngine

logger = get_logger(__name__)


@dataclass
class EncryptedVector:
    """Ordered ciphertexts plus the fixed-point scale of their plaintexts."""

    data: List[Ciphertext]
    scale: int = 1

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[Ciphertext]:
        return iter(self.data)

    def __getitem__(self, index: int) -> Ciphertext:
        return self.data[index]


@dataclass
class EncryptedMatrix:
    """Row-major matrix of ciphertexts."""

    rows: int
    cols: int
    data: List[List[Ciphertext]] = field(default_factory=list)
    scale: int = 1

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)


def _resolve(encoder: Optional[FixedPointEncoder]) -> FixedPointEncoder:
    return encoder if encoder is not None else FixedPointEncoder()


def _as_rows(matrix: Sequence[Sequence[float]], operation: str) -> List[list]:
    """Convert a 2D array-like to a list of equal-length rows."""
    if isinstance(matrix, np.ndarray):
        if matrix.ndim != 2:
            raise DimensionMismatchError(operation, expected=(2,), actual=(matrix.ndim,))
        return matrix.tolist()

    rows = [list(row) for row in matrix]
    if rows:
        cols = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != cols:
                raise DimensionMismatchError(operation, expected=(i, cols), actual=(i, len(row)))
    return rows


def _check_scales(operation: str, left: int, right: int) -> None:
    if left != right:
        raise EncodingError(f"{operation} requires equal scales, got {left} and {right}", scale=left)


# =============================================================================
# Vector Operations
# =============================================================================


def encrypt_vector(
    pk: PublicKey,
    values: Sequence[float],
    encoder: Optional[FixedPointEncoder] = None,
) -> EncryptedVector:
    """Encode and encrypt each element of a 1D array."""
    encoder = _resolve(encoder)
    flat = np.asarray(values).ravel().tolist()
    return EncryptedVector(
        data=[encrypt(pk, encoder.encode(x)) for x in flat],
        scale=encoder.scale,
    )


def decrypt_vector(pk: PublicKey, sk: PrivateKey, vec: EncryptedVector) -> np.ndarray:
    """Decrypt and decode an encrypted vector to float64 values."""
    return np.array(
        [decode_residue(decrypt(pk, sk, c), pk.n, vec.scale) for c in vec.data],
        dtype=np.float64,
    )


def add_vectors(pk: PublicKey, vec1: EncryptedVector, vec2: EncryptedVector) -> EncryptedVector:
    """Elementwise homomorphic addition."""
    if len(vec1) != len(vec2):
        raise DimensionMismatchError("add_vectors", expected=(len(vec1),), actual=(len(vec2),))
    _check_scales("add_vectors", vec1.scale, vec2.scale)
    return EncryptedVector(
        data=[add(pk, c1, c2) for c1, c2 in zip(vec1.data, vec2.data)],
        scale=vec1.scale,
    )


def inner_product(
    pk: PublicKey,
    enc_vec: EncryptedVector,
    plain_vec: Sequence[float],
    encoder: Optional[FixedPointEncoder] = None,
) -> EncryptedVector:
    """
    Encrypted-by-plaintext inner product.

    Returns a single-element EncryptedVector whose scale is
    ``enc_vec.scale * encoder.scale``.
    """
    encoder = _resolve(encoder)
    weights = np.asarray(plain_vec).ravel().tolist()
    if len(weights) != len(enc_vec):
        raise DimensionMismatchError("inner_product", expected=(len(enc_vec),), actual=(len(weights),))

    total = encrypt(pk, 0)
    for c, w in zip(enc_vec.data, weights):
        total = add(pk, total, mult(pk, c, encoder.encode(w)))
    return EncryptedVector(data=[total], scale=enc_vec.scale * encoder.scale)


# =============================================================================
# Matrix Operations
# =============================================================================


def encrypt_matrix(
    pk: PublicKey,
    matrix: Sequence[Sequence[float]],
    encoder: Optional[FixedPointEncoder] = None,
) -> EncryptedMatrix:
    """Encode and encrypt each cell of a rectangular 2D array."""
    encoder = _resolve(encoder)
    rows = _as_rows(matrix, "encrypt_matrix")
    cols = len(rows[0]) if rows else 0
    data = [[encrypt(pk, encoder.encode(x)) for x in row] for row in rows]
    return EncryptedMatrix(rows=len(rows), cols=cols, data=data, scale=encoder.scale)


def decrypt_matrix(pk: PublicKey, sk: PrivateKey, matrix: EncryptedMatrix) -> np.ndarray:
    """Decrypt and decode an encrypted matrix to a (rows, cols) float64 array."""
    out = np.zeros((matrix.rows, matrix.cols), dtype=np.float64)
    for i, row in enumerate(matrix.data):
        for j, c in enumerate(row):
            out[i, j] = decode_residue(decrypt(pk, sk, c), pk.n, matrix.scale)
    return out


def matrix_add(pk: PublicKey, m1: EncryptedMatrix, m2: EncryptedMatrix) -> EncryptedMatrix:
    """Elementwise homomorphic addition of two matrices of equal shape."""
    if m1.shape != m2.shape:
        raise DimensionMismatchError("matrix_add", expected=m1.shape, actual=m2.shape)
    _check_scales("matrix_add", m1.scale, m2.scale)
    data = [[add(pk, a, b) for a, b in zip(row1, row2)] for row1, row2 in zip(m1.data, m2.data)]
    return EncryptedMatrix(rows=m1.rows, cols=m1.cols, data=data, scale=m1.scale)


def _mult_cell(
    pk: PublicKey,
    data: List[List[Ciphertext]],
    columns: List[List[int]],
    cell: Tuple[int, int],
) -> Ciphertext:
    i, j = cell
    total = encrypt(pk, 0)
    for c, w in zip(data[i], columns[j]):
        total = add(pk, total, mult(pk, c, w))
    return total


def matrix_mult(
    pk: PublicKey,
    enc_matrix: EncryptedMatrix,
    plain_matrix: Sequence[Sequence[float]],
    encoder: Optional[FixedPointEncoder] = None,
    engine: Optional["BatchEngine"] = None,
) -> EncryptedMatrix:
    """
    Multiply an encrypted matrix by a plaintext matrix.

    Each output cell (i, j) is the homomorphic sum over k of
    mult(enc[i][k], plain[k][j]). Cost is rows * cols * inner modular
    exponentiations; with ``engine`` the cells are computed by its workers.

    Returns:
        EncryptedMatrix of shape (enc.rows, plain.cols) with scale
        ``enc.scale * encoder.scale``
    """
    encoder = _resolve(encoder)
    plain = _as_rows(plain_matrix, "matrix_mult")
    if len(plain) != enc_matrix.cols:
        raise DimensionMismatchError(
            "matrix_mult",
            expected=(enc_matrix.cols,),
            actual=(len(plain),),
        )
    out_cols = len(plain[0]) if plain else 0
    columns = [[encoder.encode(plain[k][j]) for k in range(len(plain))] for j in range(out_cols)]

    cells = [(i, j) for i in range(enc_matrix.rows) for j in range(out_cols)]
    logger.debug(
        f"matrix_mult: {enc_matrix.rows}x{enc_matrix.cols} @ {len(plain)}x{out_cols}, "
        f"{len(cells) * enc_matrix.cols} exponentiations"
    )

    # Must stay picklable for process-backed engines
    compute = partial(_mult_cell, pk, enc_matrix.data, columns)

    if engine is not None:
        flat = engine.map(compute, cells)
    else:
        flat = [compute(cell) for cell in cells]

    data = [flat[i * out_cols : (i + 1) * out_cols] for i in range(enc_matrix.rows)]
    return EncryptedMatrix(
        rows=enc_matrix.rows,
        cols=out_cols,
        data=data,
        scale=enc_matrix.scale * encoder.scale,
    )


def matrix_transpose(matrix: EncryptedMatrix) -> EncryptedMatrix:
    """Swap rows and columns; no cryptographic work."""
    data = [[matrix.data[i][j] for i in range(matrix.rows)] for j in range(matrix.cols)]
    return EncryptedMatrix(rows=matrix.cols, cols=matrix.rows, data=data, scale=matrix.scale)


__all__ = [
    "EncryptedVector",
    "EncryptedMatrix",
    "encrypt_vector",
    "decrypt_vector",
    "add_vectors",
    "inner_product",
    "encrypt_matrix",
    "decrypt_matrix",
    "matrix_add",
    "matrix_mult",
    "matrix_transpose",
]
