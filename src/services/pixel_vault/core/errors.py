"""
Error taxonomy for Pixel Vault operations

All errors derive from ValueError so callers that only care about
"bad input" can keep catching ValueError.
"""

from typing import Any, Dict, Optional


class StegoError(ValueError):
    """Base class for every steganography failure"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CapacityExceededError(StegoError):
    def __init__(self, required: int, available: int):
        super().__init__(
            f"Message is too large for this image. Required capacity: {required} bits. Available: {available} bits.",
            {"required": required, "available": available},
        )
        self.required = required
        self.available = available


class HeaderReadError(StegoError):
    def __init__(self, available: int):
        super().__init__(
            "Could not read message length. Image may be corrupt or too small.",
            {"available": available},
        )
        self.available = available


class InvalidLengthError(StegoError):
    def __init__(self, length: int, capacity: int):
        super().__init__(
            "Invalid message length in header. The password may be incorrect or the data is corrupted.",
            {"length": length, "capacity": capacity},
        )
        self.length = length
        self.capacity = capacity


class TruncatedPayloadError(StegoError):
    def __init__(self, required: int, available: int):
        super().__init__(
            "Failed to extract full message. The image might be corrupted.",
            {"required": required, "available": available},
        )
        self.required = required
        self.available = available


class DecryptionError(StegoError):
    def __init__(self, message: str = "Decryption failed. The password is likely incorrect or the data is corrupt."):
        super().__init__(message)


class FramingError(StegoError):
    def __init__(self, position: int, code_point: int):
        super().__init__(
            f"Ciphertext character at position {position} (code point {code_point}) does not fit in 8 bits",
            {"position": position, "code_point": code_point},
        )


class ContentParseError(StegoError):
    pass


class ImageDecodeError(StegoError):
    pass


class ImageEncodeError(StegoError):
    pass
