"""
Paillier Cipher Core.

Encryption, decryption and the four homomorphic operators. Ciphertexts are
plain Python ints in [0, n^2); nothing marks an int as a ciphertext, so
validity is a matter of provenance.

Plaintexts are interpreted mod n. Values outside [0, n) are accepted and
wrap; no range check is performed anywhere in this module.

Homomorphic identities (all mod n):
    decrypt(add(c1, c2))  == m1 + m2
    decrypt(sub(c1, c2))  == m1 - m2
    decrypt(mult(c, k))   == m * k
    decrypt(neg(c))       == -m
"""

import math
import operator
import secrets

import gmpy2

from .keys import PrivateKey, PublicKey, l_function

Ciphertext = int
Plaintext = int


def _random_unit(n: int) -> int:
    """Random r with 0 < r < n and gcd(r, n) == 1."""
    while True:
        r = secrets.randbelow(n)
        if r > 0 and math.gcd(r, n) == 1:
            return r


def encrypt(pk: PublicKey, m: Plaintext) -> Ciphertext:
    """
    Encrypt a plaintext: c = g^m * r^n mod n^2 with fresh randomness r.

    ``m`` must be integral. Two encryptions of the same plaintext differ
    with overwhelming probability.
    """
    r = _random_unit(pk.n)
    n_square = pk.n_square
    first_term = mult(pk, pk.g, m)
    second_term = gmpy2.powmod(r, pk.n, n_square)
    return int(first_term * second_term % n_square)


def decrypt(pk: PublicKey, sk: PrivateKey, c: Ciphertext) -> Plaintext:
    """Decrypt a ciphertext: m = L(c^lam mod n^2) * mu mod n."""
    intermediate = int(gmpy2.powmod(int(c), sk.lam, pk.n_square))
    return l_function(intermediate, pk.n) * sk.mu % pk.n


def add(pk: PublicKey, c1: Ciphertext, c2: Ciphertext) -> Ciphertext:
    """Homomorphic addition of the underlying plaintexts."""
    return int(c1) * int(c2) % pk.n_square


def neg(pk: PublicKey, c: Ciphertext) -> Ciphertext:
    """Homomorphic negation: the inverse of c modulo n^2."""
    return int(gmpy2.invert(int(c), pk.n_square))


def sub(pk: PublicKey, c1: Ciphertext, c2: Ciphertext) -> Ciphertext:
    """Homomorphic subtraction of the underlying plaintexts."""
    return int(c1) * neg(pk, c2) % pk.n_square


def mult(pk: PublicKey, c: Ciphertext, k: int) -> Ciphertext:
    """
    Homomorphic multiplication of the plaintext by a public scalar k.

    Negative k exponentiates the inverse of c. Non-integral k (floats)
    raises TypeError; encode real values with FixedPointEncoder first.
    """
    k = operator.index(k)
    if k < 0:
        return int(gmpy2.powmod(neg(pk, c), -k, pk.n_square))
    return int(gmpy2.powmod(int(c), k, pk.n_square))


__all__ = [
    "Ciphertext",
    "Plaintext",
    "encrypt",
    "decrypt",
    "add",
    "sub",
    "mult",
    "neg",
]
