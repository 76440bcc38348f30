"""
Validation utilities for Pixel Vault operations
"""

from typing import Sequence, Tuple


def validate_password(password: str | None) -> str:
    """
    Validate that a password was supplied

    Args:
        password: Password from the caller

    Returns:
        The password unchanged

    Raises:
        ValueError: If the password is missing or empty
    """
    if not password:
        raise ValueError("A password is required for encryption and decryption")
    return password


def validate_files(files: Sequence[Tuple[str, str, bytes]]) -> None:
    """
    Validate files destined for a bundle

    Args:
        files: Sequence of (name, mime_type, data)

    Raises:
        ValueError: If no files are given or a file has no name
    """
    if not files:
        raise ValueError("At least one file must be provided")
    for name, _, _ in files:
        if not name:
            raise ValueError("Every bundled file needs a name")
