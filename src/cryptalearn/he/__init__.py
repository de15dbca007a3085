"""
CryptaLearn Paillier HE Module.

Provides additively homomorphic encryption for privacy-preserving
learning workloads, such as encrypting gradient vectors before aggregation.

Architecture:
    1. primes / keys - probable-prime generation and key pair derivation
    2. cipher - encrypt, decrypt, add, sub, mult, neg
    3. encoding / vectors - fixed-point encoding and vector/matrix operations
    4. rotation - time-based key rotation with a thread-safe manager
    5. batch - sequential and worker-pool batch encryption/decryption
    6. serialization - comma-delimited text export/import of keys

The scheme provides no ciphertext authentication and no multiplication of
two ciphertexts. Plaintexts wrap modulo n without error.
"""

from .batch import (
    BatchEngine,
    batch_add,
    batch_decrypt,
    batch_encrypt,
    batch_mult,
    parallel_decrypt,
    parallel_encrypt,
    partition,
)
from .cipher import Ciphertext, Plaintext, add, decrypt, encrypt, mult, neg, sub
from .encoding import FixedPointEncoder, decode_residue
from .keys import PrivateKey, PublicKey, generate_keypair, l_function
from .primes import generate_prime, is_probable_prime, mod_inverse
from .rotation import KeyPair, KeyRotationManager, create_key_rotation
from .serialization import (
    export_private_key,
    export_public_key,
    import_private_key,
    import_public_key,
)
from .vectors import (
    EncryptedMatrix,
    EncryptedVector,
    add_vectors,
    decrypt_matrix,
    decrypt_vector,
    encrypt_matrix,
    encrypt_vector,
    inner_product,
    matrix_add,
    matrix_mult,
    matrix_transpose,
)

__all__ = [
    # Primes
    "generate_prime",
    "is_probable_prime",
    "mod_inverse",
    # Keys
    "PublicKey",
    "PrivateKey",
    "KeyPair",
    "generate_keypair",
    "l_function",
    # Cipher
    "Ciphertext",
    "Plaintext",
    "encrypt",
    "decrypt",
    "add",
    "sub",
    "mult",
    "neg",
    # Vectors / matrices
    "FixedPointEncoder",
    "decode_residue",
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
    # Rotation
    "KeyRotationManager",
    "create_key_rotation",
    # Batch
    "BatchEngine",
    "partition",
    "batch_encrypt",
    "batch_decrypt",
    "batch_add",
    "batch_mult",
    "parallel_encrypt",
    "parallel_decrypt",
    # Serialization
    "export_public_key",
    "import_public_key",
    "export_private_key",
    "import_private_key",
]
