"""
CryptaLearn: Privacy-Preserving Learning Toolkit

Core component:
- Paillier partially homomorphic encryption (cryptalearn.he) with vector and
  matrix operations, key rotation and parallel batch processing

Federated-learning and differential-privacy collaborators consume this
package through cryptalearn.he's encrypt_vector/decrypt_vector entry points.
"""

__version__ = "0.1.0"
__author__ = "The CryptaLearn Team"

__all__ = ["__version__"]
