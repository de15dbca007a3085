"""
CryptaLearn Unified Error Taxonomy.

This module provides a centralized error hierarchy for all CryptaLearn components.
All errors include:
- Machine-readable error codes
- Structured details (never key material)
- Request ID correlation for tracing

Error Code Naming Convention:
- CL_<COMPONENT>_<SPECIFIC>
- Components: HE, CONFIG

Security:
- NEVER include primes, lambda, mu or any other private key field in errors
- Shapes, field counts and key fingerprints are safe to report
- Errors should be safe to log and return to callers

Wraparound of plaintexts mod n (and ciphertexts mod n^2) is part of the
Paillier contract and has no error type.
"""

from typing import Any, Dict, Optional, Sequence


class CryptaLearnError(Exception):
    """Base exception for all CryptaLearn errors.

    All CryptaLearn errors include:
    - code: Machine-readable error code (e.g., CL_HE_KEYGEN_FAILED)
    - message: Human-readable description
    - details: Structured metadata (NEVER include key material)
    - request_id: Optional correlation ID for distributed tracing
    """

    def __init__(
        self,
        message: str,
        code: str = "CL_INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.request_id = request_id

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.request_id:
            parts.append(f"(request_id: {self.request_id})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "request_id": self.request_id,
        }


# =============================================================================
# Homomorphic Encryption Errors (CL_HE_*)
# =============================================================================


class HEError(CryptaLearnError):
    """Base class for homomorphic encryption errors."""

    pass


class KeyGenerationError(HEError):
    """Raised when Paillier key derivation fails (mu has no inverse mod n)."""

    def __init__(
        self,
        reason: str,
        bits: Optional[int] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Key generation failed: {reason}",
            code="CL_HE_KEYGEN_FAILED",
            details={"bits": bits} if bits is not None else {},
            request_id=request_id,
        )


class DimensionMismatchError(HEError):
    """Raised when vector or matrix shapes disagree in a structural operation."""

    def __init__(
        self,
        operation: str,
        expected: Sequence[int],
        actual: Sequence[int],
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Dimension mismatch in {operation}: expected {tuple(expected)}, got {tuple(actual)}",
            code="CL_HE_DIMENSION_MISMATCH",
            details={
                "operation": operation,
                "expected": list(expected),
                "actual": list(actual),
            },
            request_id=request_id,
        )
        self.operation = operation
        self.expected = tuple(expected)
        self.actual = tuple(actual)


class KeyFormatError(HEError):
    """Raised when a serialized key string cannot be parsed."""

    def __init__(
        self,
        reason: str,
        key_type: Optional[str] = None,
        field_count: Optional[int] = None,
        request_id: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if key_type:
            details["key_type"] = key_type
        if field_count is not None:
            details["field_count"] = field_count
        super().__init__(
            message=f"Invalid key format: {reason}",
            code="CL_HE_KEY_FORMAT_ERROR",
            details=details,
            request_id=request_id,
        )


class EncodingError(HEError):
    """Raised when a value cannot be mapped to or combined as a fixed-point plaintext."""

    def __init__(
        self,
        reason: str,
        scale: Optional[int] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Plaintext encoding failed: {reason}",
            code="CL_HE_ENCODING_ERROR",
            details={"scale": scale} if scale is not None else {},
            request_id=request_id,
        )


# =============================================================================
# Configuration Errors (CL_CONFIG_*)
# =============================================================================


class ConfigError(CryptaLearnError):
    """Base class for configuration errors."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    def __init__(
        self,
        config_key: str,
        reason: str,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Invalid configuration for {config_key}: {reason}",
            code="CL_CONFIG_VALIDATION_FAILED",
            details={"config_key": config_key},
            request_id=request_id,
        )


# =============================================================================
# Error Code Registry (for documentation and validation)
# =============================================================================

ERROR_CODES = {
    # HE errors
    "CL_HE_KEYGEN_FAILED": "Paillier key generation failed",
    "CL_HE_DIMENSION_MISMATCH": "Vector or matrix shape mismatch",
    "CL_HE_KEY_FORMAT_ERROR": "Malformed serialized key",
    "CL_HE_ENCODING_ERROR": "Fixed-point plaintext encoding failed",
    # Config errors
    "CL_CONFIG_VALIDATION_FAILED": "Configuration validation failed",
    # Internal
    "CL_INTERNAL_ERROR": "Internal error",
}


def validate_error_code(code: str) -> bool:
    """Validate that an error code is registered."""
    return code in ERROR_CODES


__all__ = [
    # Base
    "CryptaLearnError",
    # HE
    "HEError",
    "KeyGenerationError",
    "DimensionMismatchError",
    "KeyFormatError",
    "EncodingError",
    # Config
    "ConfigError",
    "ConfigValidationError",
    # Registry
    "ERROR_CODES",
    "validate_error_code",
]
