"""
Number-theoretic helpers for Paillier key generation.

Arithmetic is delegated to gmpy2 (GMP) and randomness to the ``secrets``
module, so every call draws from the operating system CSPRNG and no
generator state is shared between callers.
"""

import secrets
from typing import Optional

import gmpy2

DEFAULT_PRIMALITY_ROUNDS = 20


def is_probable_prime(n: int, confidence: int = DEFAULT_PRIMALITY_ROUNDS) -> bool:
    """Run ``confidence`` Miller-Rabin rounds against ``n``."""
    return bool(gmpy2.is_prime(n, confidence))


def random_bits_exact(bits: int) -> int:
    """Uniform random integer whose bit length is exactly ``bits``."""
    return secrets.randbits(bits) | (1 << (bits - 1))


def generate_prime(bits: int, rounds: int = DEFAULT_PRIMALITY_ROUNDS) -> int:
    """
    Generate a probable prime of exactly ``bits`` bits.

    Candidates are sampled until one passes the primality test. There is no
    retry cap; the density of primes makes termination practically certain.

    Args:
        bits: Bit length of the prime (at least 2)
        rounds: Miller-Rabin rounds per candidate

    Returns:
        A probable prime ``p`` with ``p.bit_length() == bits``
    """
    if bits < 2:
        raise ValueError(f"Cannot generate a prime with {bits} bits")

    while True:
        candidate = random_bits_exact(bits)
        if is_probable_prime(candidate, rounds):
            return candidate


def mod_inverse(a: int, n: int) -> Optional[int]:
    """Inverse of ``a`` modulo ``n``, or None if ``gcd(a, n) != 1``."""
    try:
        return int(gmpy2.invert(a, n))
    except ZeroDivisionError:
        return None


__all__ = [
    "DEFAULT_PRIMALITY_ROUNDS",
    "is_probable_prime",
    "random_bits_exact",
    "generate_prime",
    "mod_inverse",
]
