"""
Paillier key rotation.

KeyRotationManager owns one active key pair and decides lazily, on each
rotate_keys() call, whether the rotation period has elapsed:

    fresh  (clock() - last_rotation <= period): rotate_keys() is a no-op
    due    (clock() - last_rotation >  period): a new pair replaces the old

There is no background timer. Rotation does not re-encrypt anything;
ciphertexts made under the discarded key no longer decrypt under the new
private key, so callers must migrate data before or at rotation.

All state access goes through one lock, so a manager can be shared between
threads.
"""

import threading
import time
from datetime import timedelta
from typing import Callable, Optional, Tuple, Union

from ..config import get_settings
from ..logging import get_logger
from .keys import PrivateKey, PublicKey, generate_keypair

logger = get_logger(__name__)

KeyPair = Tuple[PublicKey, PrivateKey]


class KeyRotationManager:
    """
    Manages the lifecycle of one Paillier key pair.

    Holds the rotation state: current public/private key, last rotation
    time, rotation period and key size.
    """

    def __init__(
        self,
        rotation_period: Union[float, timedelta, None] = None,
        key_bits: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the manager and generate the first key pair.

        Args:
            rotation_period: Seconds (or timedelta) a pair stays active
                (default: ``HESettings.rotation_period_seconds``)
            key_bits: Modulus size for every generated pair (default: ``HESettings.key_bits``)
            clock: Source of epoch seconds
        """
        if isinstance(rotation_period, timedelta):
            rotation_period = rotation_period.total_seconds()
        settings = get_settings(rotation_period_seconds=rotation_period, key_bits=key_bits)

        self.rotation_period = settings.rotation_period_seconds
        self.key_bits = settings.key_bits
        self._primality_rounds = settings.primality_rounds
        self._clock = clock
        self._lock = threading.RLock()

        self._current_pk, self._current_sk = generate_keypair(self.key_bits, self._primality_rounds)
        self._last_rotation = self._clock()
        logger.info(
            f"Key rotation initialized: period={self.rotation_period}s, bits={self.key_bits}, "
            f"fingerprint={self._current_pk.get_fingerprint()}"
        )

    def current_key(self) -> KeyPair:
        """Return the active key pair without changing state."""
        with self._lock:
            return self._current_pk, self._current_sk

    def last_rotation(self) -> float:
        """Epoch seconds of the last (or initial) key generation."""
        with self._lock:
            return self._last_rotation

    def rotation_due(self) -> bool:
        """True once more than ``rotation_period`` seconds have passed."""
        with self._lock:
            return self._clock() - self._last_rotation > self.rotation_period

    def rotate_keys(self) -> KeyPair:
        """
        Replace the key pair if the rotation period has elapsed.

        Returns:
            The new pair after a rotation, otherwise the unchanged current pair
        """
        with self._lock:
            if not self.rotation_due():
                return self._current_pk, self._current_sk

            previous = self._current_pk.get_fingerprint()
            self._current_pk, self._current_sk = generate_keypair(self.key_bits, self._primality_rounds)
            self._last_rotation = self._clock()
            logger.info(
                f"Rotated Paillier keys: {previous} -> {self._current_pk.get_fingerprint()}"
            )
            return self._current_pk, self._current_sk


def create_key_rotation(
    rotation_period: Union[float, timedelta, None] = None,
    key_bits: Optional[int] = None,
) -> KeyRotationManager:
    """Factory for a KeyRotationManager using the wall clock."""
    return KeyRotationManager(rotation_period=rotation_period, key_bits=key_bits)


__all__ = ["KeyPair", "KeyRotationManager", "create_key_rotation"]
