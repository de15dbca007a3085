"""
Tests for Paillier key derivation.
"""

import dataclasses
import math

import gmpy2
import pytest

from cryptalearn.errors import KeyGenerationError
from cryptalearn.he import keys as keys_module
from cryptalearn.he.keys import PrivateKey, PublicKey, generate_keypair, l_function
from cryptalearn.he.primes import generate_prime, is_probable_prime


class TestGenerateKeypair:
    """Tests for key pair generation."""

    def test_public_key_structure(self, pk, sk):
        assert pk.n == sk.p * sk.q
        assert pk.g == pk.n + 1
        assert pk.n_square == pk.n * pk.n
        assert pk.bits == 512

    def test_primes_have_half_bits(self, sk):
        assert sk.p.bit_length() == 256
        assert sk.q.bit_length() == 256
        assert is_probable_prime(sk.p)
        assert is_probable_prime(sk.q)

    def test_lambda_is_lcm(self, sk):
        p1, q1 = sk.p - 1, sk.q - 1
        assert sk.lam == p1 * q1 // math.gcd(p1, q1)
        assert sk.lam % math.gcd(p1, q1) == 0

    def test_mu_inverts_l_of_g(self, pk, sk):
        x = int(gmpy2.powmod(pk.g, sk.lam, pk.n_square))
        assert (l_function(x, pk.n) * sk.mu) % pk.n == 1

    def test_odd_bits_floor_half(self):
        pk, sk = generate_keypair(65)
        assert sk.p.bit_length() == 32
        assert pk.bits == 65
        assert pk.n.bit_length() <= 64

    def test_keys_are_immutable(self, pk, sk):
        with pytest.raises(dataclasses.FrozenInstanceError):
            pk.n = 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            sk.mu = 1

    def test_private_repr_hides_material(self, sk):
        text = repr(sk)
        assert str(sk.p) not in text
        assert str(sk.lam) not in text

    def test_fingerprint(self, pk):
        fp = pk.get_fingerprint()
        assert fp.startswith("sha256:")
        assert len(fp) == len("sha256:") + 16
        assert fp == PublicKey(pk.n, pk.g, pk.n_square, pk.bits).get_fingerprint()

    def test_missing_inverse_raises(self, monkeypatch):
        """Key derivation fails loudly if mu cannot be computed."""
        monkeypatch.setattr(keys_module, "mod_inverse", lambda a, n: None)
        with pytest.raises(KeyGenerationError) as exc_info:
            generate_keypair(64)
        assert exc_info.value.code == "CL_HE_KEYGEN_FAILED"
        assert exc_info.value.details == {"bits": 64}

    def test_default_bits_from_settings(self, monkeypatch):
        monkeypatch.setenv("CRYPTALEARN_HE_KEY_BITS", "128")
        pk, _ = generate_keypair()
        assert pk.bits == 128

    def test_explicit_rounds_kept_with_default_bits(self, monkeypatch):
        monkeypatch.setenv("CRYPTALEARN_HE_KEY_BITS", "64")
        monkeypatch.setenv("CRYPTALEARN_HE_PRIMALITY_ROUNDS", "20")
        seen = []

        def recording_prime(bits, rounds):
            seen.append(rounds)
            return generate_prime(bits, rounds)

        monkeypatch.setattr(keys_module, "generate_prime", recording_prime)
        generate_keypair(rounds=3)
        assert seen == [3, 3]

    def test_default_rounds_from_settings(self, monkeypatch):
        monkeypatch.setenv("CRYPTALEARN_HE_PRIMALITY_ROUNDS", "7")
        seen = []

        def recording_prime(bits, rounds):
            seen.append(rounds)
            return generate_prime(bits, rounds)

        monkeypatch.setattr(keys_module, "generate_prime", recording_prime)
        generate_keypair(64)
        assert seen == [7, 7]


class TestLFunction:
    """Tests for L(x) = (x - 1) / n."""

    def test_exact_division(self):
        assert l_function(1 + 7 * 11, 11) == 7
        assert l_function(1, 11) == 0


def test_private_key_fields():
    sk = PrivateKey(lam=1, mu=2, p=3, q=5)
    assert (sk.lam, sk.mu, sk.p, sk.q) == (1, 2, 3, 5)
