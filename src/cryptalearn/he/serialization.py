"""
Text serialization for Paillier key material.

Wire formats (base-10 integers, comma-delimited, no whitespace):

    public key:   n,g,n_square,bits
    private key:  lam,mu,p,q

The formats carry no version tag, so any field change is a breaking change.
Import only checks the field count and the numeric syntax of each field;
it does not check that the fields are consistent with each other.
"""

import re
from typing import List

from ..errors import KeyFormatError
from ..logging import get_logger
from .keys import PrivateKey, PublicKey

logger = get_logger(__name__)

DELIMITER = ","
PUBLIC_KEY_FIELDS = ("n", "g", "n_square", "bits")
PRIVATE_KEY_FIELDS = ("lam", "mu", "p", "q")

_INTEGER = re.compile(r"-?[0-9]+")


def _parse_fields(text: str, names: tuple, key_type: str) -> List[int]:
    parts = text.split(DELIMITER)
    if len(parts) != len(names):
        logger.warning(f"Rejected {key_type} key: expected {len(names)} fields, got {len(parts)}")
        raise KeyFormatError(
            f"expected {len(names)} fields, got {len(parts)}",
            key_type=key_type,
            field_count=len(parts),
        )

    values = []
    for name, part in zip(names, parts):
        if not _INTEGER.fullmatch(part):
            logger.warning(f"Rejected {key_type} key: field '{name}' is not a base-10 integer")
            raise KeyFormatError(
                f"field '{name}' is not a base-10 integer",
                key_type=key_type,
                field_count=len(parts),
            )
        values.append(int(part))
    return values


def export_public_key(pk: PublicKey) -> str:
    """Encode a public key as ``n,g,n_square,bits``."""
    return DELIMITER.join(str(v) for v in (pk.n, pk.g, pk.n_square, pk.bits))


def import_public_key(text: str) -> PublicKey:
    """
    Decode a public key produced by export_public_key.

    Raises:
        KeyFormatError: On a wrong field count or a non-numeric field
    """
    n, g, n_square, bits = _parse_fields(text, PUBLIC_KEY_FIELDS, "public")
    return PublicKey(n=n, g=g, n_square=n_square, bits=bits)


def export_private_key(sk: PrivateKey) -> str:
    """Encode a private key as ``lam,mu,p,q``."""
    return DELIMITER.join(str(v) for v in (sk.lam, sk.mu, sk.p, sk.q))


def import_private_key(text: str) -> PrivateKey:
    """
    Decode a private key produced by export_private_key.

    Raises:
        KeyFormatError: On a wrong field count or a non-numeric field
    """
    lam, mu, p, q = _parse_fields(text, PRIVATE_KEY_FIELDS, "private")
    return PrivateKey(lam=lam, mu=mu, p=p, q=q)


__all__ = [
    "DELIMITER",
    "PUBLIC_KEY_FIELDS",
    "PRIVATE_KEY_FIELDS",
    "export_public_key",
    "import_public_key",
    "export_private_key",
    "import_private_key",
]
