"""
Tests for the Paillier cipher core.

Covers round-trips, the homomorphic identities, wraparound modulo n and
semantic security (probabilistic encryption).
"""

import pytest

from cryptalearn.he.cipher import add, decrypt, encrypt, mult, neg, sub
from cryptalearn.he.keys import generate_keypair


class TestEncryptDecrypt:
    """Tests for encryption and decryption."""

    def test_scenario_512_bit_roundtrip(self):
        """bits=512, m=42 decrypts back to 42."""
        pk, sk = generate_keypair(512)
        assert decrypt(pk, sk, encrypt(pk, 42)) == 42

    @pytest.mark.parametrize("m", [0, 1, 2, 12345, 2**200])
    def test_roundtrip(self, pk, sk, m):
        assert decrypt(pk, sk, encrypt(pk, m)) == m

    def test_roundtrip_upper_bound(self, pk, sk):
        assert decrypt(pk, sk, encrypt(pk, pk.n - 1)) == pk.n - 1

    def test_ciphertext_range(self, pk):
        for m in (0, 7, pk.n - 1):
            c = encrypt(pk, m)
            assert 0 <= c < pk.n_square

    def test_encryption_is_probabilistic(self, pk):
        assert encrypt(pk, 42) != encrypt(pk, 42)

    def test_out_of_range_plaintext_wraps(self, pk, sk):
        assert decrypt(pk, sk, encrypt(pk, pk.n + 5)) == 5

    def test_negative_plaintext_wraps(self, pk, sk):
        assert decrypt(pk, sk, encrypt(pk, -3)) == pk.n - 3

    def test_float_plaintext_rejected(self, pk):
        with pytest.raises(TypeError):
            encrypt(pk, 1.5)

    def test_garbage_ciphertext_decrypts(self, pk, sk):
        """No authentication: arbitrary integers still decrypt to something in [0, n)."""
        m = decrypt(pk, sk, 123456789)
        assert 0 <= m < pk.n

    def test_wrong_key_does_not_decrypt(self, pk):
        other_pk, other_sk = generate_keypair(512)
        c = encrypt(pk, 42)
        assert decrypt(other_pk, other_sk, c) != 42


class TestHomomorphicOperations:
    """Tests for add, sub, mult and neg."""

    def test_scenario_add(self, pk, sk):
        """30 + 12 == 42 under encryption."""
        c = add(pk, encrypt(pk, 30), encrypt(pk, 12))
        assert decrypt(pk, sk, c) == 42

    def test_add_wraps_mod_n(self, pk, sk):
        c = add(pk, encrypt(pk, pk.n - 1), encrypt(pk, 2))
        assert decrypt(pk, sk, c) == 1

    def test_sub(self, pk, sk):
        assert decrypt(pk, sk, sub(pk, encrypt(pk, 50), encrypt(pk, 8))) == 42

    def test_sub_negative_result_wraps(self, pk, sk):
        assert decrypt(pk, sk, sub(pk, encrypt(pk, 8), encrypt(pk, 50))) == pk.n - 42

    @pytest.mark.parametrize("a,k", [(7, 6), (0, 99), (123, 0), (5, 2**64)])
    def test_mult(self, pk, sk, a, k):
        assert decrypt(pk, sk, mult(pk, encrypt(pk, a), k)) == (a * k) % pk.n

    def test_mult_negative_scalar(self, pk, sk):
        assert decrypt(pk, sk, mult(pk, encrypt(pk, 7), -3)) == (-21) % pk.n

    def test_mult_rejects_float_scalar(self, pk):
        with pytest.raises(TypeError):
            mult(pk, encrypt(pk, 7), 2.5)

    def test_neg(self, pk, sk):
        assert decrypt(pk, sk, neg(pk, encrypt(pk, 42))) == pk.n - 42

    def test_neg_then_add_is_zero(self, pk, sk):
        c = encrypt(pk, 99)
        assert decrypt(pk, sk, add(pk, c, neg(pk, c))) == 0

    def test_operators_are_deterministic(self, pk):
        c1, c2 = encrypt(pk, 3), encrypt(pk, 4)
        assert add(pk, c1, c2) == add(pk, c1, c2)
        assert sub(pk, c1, c2) == sub(pk, c1, c2)
        assert mult(pk, c1, 5) == mult(pk, c1, 5)
        assert neg(pk, c1) == neg(pk, c1)

    def test_non_invertible_ciphertext(self, pk):
        """A multiple of n has no inverse modulo n^2."""
        with pytest.raises(ZeroDivisionError):
            neg(pk, pk.n)
