"""
Paillier Key Material.

Key Types:
    - PublicKey (n, g, n_square, bits): For encryption and homomorphic
      operations, safe to distribute
    - PrivateKey (lam, mu, p, q): For decryption, held by the data owner

Key Derivation (g = n + 1):
    1. p, q drawn as independent probable primes of bits // 2 bits
    2. n = p * q, lam = lcm(p - 1, q - 1)
    3. mu = L(g^lam mod n^2)^-1 mod n, where L(x) = (x - 1) / n

Both key types are frozen value objects; a pair is only ever produced
together by generate_keypair.
"""

import hashlib
from dataclasses import dataclass, field
from typing import Optional, Tuple

import gmpy2

from ..config import get_settings
from ..errors import KeyGenerationError
from ..logging import get_logger
from .primes import generate_prime, mod_inverse

logger = get_logger(__name__)


@dataclass(frozen=True)
class PublicKey:
    """
    Paillier public key.

    ``bits`` is the modulus size that was requested at generation time.
    """

    n: int
    g: int
    n_square: int
    bits: int

    def get_fingerprint(self) -> str:
        """Get key fingerprint for identification."""
        return f"sha256:{hashlib.sha256(str(self.n).encode('ascii')).hexdigest()[:16]}"


@dataclass(frozen=True)
class PrivateKey:
    """
    Paillier private key.

    MUST be kept secret by the data owner. Only ``lam`` and ``mu`` are
    needed for decryption; ``p`` and ``q`` are kept for diagnostics.
    """

    lam: int = field(repr=False)
    mu: int = field(repr=False)
    p: int = field(repr=False)
    q: int = field(repr=False)


def l_function(x: int, n: int) -> int:
    """L(x) = (x - 1) / n, exact for x = 1 mod n."""
    return (x - 1) // n


def generate_keypair(
    bits: Optional[int] = None,
    rounds: Optional[int] = None,
) -> Tuple[PublicKey, PrivateKey]:
    """
    Generate a Paillier key pair.

    An odd ``bits`` loses one bit of modulus size because each prime gets
    ``bits // 2`` bits. The primes are not checked for distinctness.

    Args:
        bits: Requested modulus size (default: ``HESettings.key_bits``)
        rounds: Miller-Rabin rounds per prime candidate (default: ``HESettings.primality_rounds``)

    Returns:
        Tuple of (public_key, private_key)

    Raises:
        KeyGenerationError: If mu has no inverse modulo n
    """
    if bits is None or rounds is None:
        settings = get_settings()
        bits = settings.key_bits if bits is None else bits
        rounds = settings.primality_rounds if rounds is None else rounds

    half_bits = bits // 2
    p = generate_prime(half_bits, rounds)
    q = generate_prime(half_bits, rounds)

    n = p * q
    n_square = n * n
    lam = int(gmpy2.lcm(p - 1, q - 1))
    g = n + 1

    mu = mod_inverse(l_function(int(gmpy2.powmod(g, lam, n_square)), n), n)
    if mu is None:
        raise KeyGenerationError("L(g^lambda mod n^2) has no inverse modulo n", bits=bits)

    public_key = PublicKey(n=n, g=g, n_square=n_square, bits=bits)
    private_key = PrivateKey(lam=lam, mu=mu, p=p, q=q)

    logger.info(f"Generated Paillier key pair: bits={bits}, fingerprint={public_key.get_fingerprint()}")
    return public_key, private_key


__all__ = ["PublicKey", "PrivateKey", "l_function", "generate_keypair"]
