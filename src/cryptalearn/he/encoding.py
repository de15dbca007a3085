"""
Fixed-point plaintext encoding.

Paillier plaintexts are integers mod n, so real values are mapped through
a fixed-point scale before encryption:

    encode(x) = round(x * scale)            (round half to even)
    decode(m) = centered(m mod n) / scale

where centered() lifts residues above n // 2 to negative integers. Integer
inputs are scaled exactly, without going through float arithmetic.

Every homomorphic product with an encoded weight multiplies the scale, so
encrypted vectors and matrices carry the scale of their plaintexts and
decoding divides by it.
"""

import math
from numbers import Integral, Real
from typing import Optional

from ..config import get_settings
from ..errors import EncodingError


class FixedPointEncoder:
    """Maps real values to Paillier plaintexts with a fixed integer scale."""

    def __init__(self, scale: Optional[int] = None):
        """
        Args:
            scale: Positive integer scale (default: ``HESettings.encoding_scale``)
        """
        if scale is None:
            scale = get_settings().encoding_scale
        if isinstance(scale, bool) or not isinstance(scale, Integral) or scale < 1:
            raise EncodingError("scale must be a positive integer", scale=None)
        self.scale = int(scale)

    def __repr__(self) -> str:
        return f"FixedPointEncoder(scale={self.scale})"

    def encode(self, value: Real) -> int:
        """Encode one value; NaN and infinities are rejected."""
        if isinstance(value, Integral):
            return int(value) * self.scale
        value = float(value)
        if not math.isfinite(value):
            raise EncodingError(f"cannot encode non-finite value {value!r}", scale=self.scale)
        return round(value * self.scale)

    @staticmethod
    def centered(m: int, n: int) -> int:
        """Lift a residue mod n into (-n/2, n/2]."""
        m = int(m) % n
        return m - n if m > n // 2 else m

    def decode(self, m: int, n: int, scale: Optional[int] = None) -> float:
        """
        Decode a plaintext residue.

        Args:
            m: Decrypted plaintext
            n: Public modulus
            scale: Accumulated scale of ``m`` (default: this encoder's scale)
        """
        return decode_residue(m, n, scale if scale is not None else self.scale)


def decode_residue(m: int, n: int, scale: int) -> float:
    """
    Map a residue mod n to ``centered(m) / scale`` as a float.

    Residues that decrypted under the wrong key are uniform over [0, n) and
    can exceed the float range for moduli above ~1024 bits; those saturate
    to +/-inf.

    Raises:
        EncodingError: If scale is not a positive integer
    """
    if isinstance(scale, bool) or not isinstance(scale, Integral) or scale < 1:
        raise EncodingError("scale must be a positive integer", scale=None)
    value = FixedPointEncoder.centered(m, n)
    try:
        return value / int(scale)
    except OverflowError:
        return math.copysign(math.inf, value)


__all__ = ["FixedPointEncoder", "decode_residue"]
