"""
Main service class for Pixel Vault operations
"""

import logging
from typing import Optional, Sequence, Tuple, Union

from ..models.vault_models import (
    HEADER_BITS,
    CapacityResult,
    CipherScheme,
    ContentKind,
    CoverImage,
    FileBundle,
    HideResult,
    PlainText,
    RevealResult,
    VaultContent,
)
from .content import decode_content, encode_content
from .encryption import max_plaintext_bytes
from .steganography import embed_message, extract_message, pixel_order, read_header
from ..utils.validation import validate_files, validate_password
from src.utility.constants_manager import ConstantsManager


logger = logging.getLogger(__name__)


class PixelVaultService:
    """
    High-level interface for hiding and revealing content in images

    Text and file bundles are tagged, encrypted with the password and
    scattered over the image in a password-derived pixel order.
    """

    def __init__(self, cipher_scheme: Optional[Union[CipherScheme, str]] = None):
        if cipher_scheme is None:
            cipher_scheme = ConstantsManager().get_cipher_scheme()
        self.cipher_scheme = CipherScheme(cipher_scheme)
        logger.info(f"PixelVaultService initialized with cipher={self.cipher_scheme.value}")

    def capacity(self, cover: CoverImage) -> CapacityResult:
        """
        Calculate how much content an image can carry

        Args:
            cover: Cover image

        Returns:
            CapacityResult with bit counts and an estimate of the text that fits
        """
        capacity_bits = cover.capacity
        max_chars = max(0, (capacity_bits - HEADER_BITS) // 8)
        tag_overhead = len(encode_content(PlainText(text="")))
        max_text = max(0, max_plaintext_bytes(max_chars, self.cipher_scheme) - tag_overhead)

        return CapacityResult(
            width=cover.width,
            height=cover.height,
            capacity_bits=capacity_bits,
            capacity_bytes=capacity_bits // 8,
            max_ciphertext_chars=max_chars,
            max_text_bytes=max_text,
            cipher=self.cipher_scheme,
        )

    def hide(self, cover: CoverImage, content: VaultContent, password: str) -> Tuple[CoverImage, HideResult]:
        """
        Hide tagged content in an image

        Args:
            cover: Cover image
            content: PlainText or FileBundle to hide
            password: Password for encryption and pixel shuffling

        Returns:
            Tuple of (stego_image, result_metadata)

        Raises:
            CapacityExceededError: If the encrypted content does not fit
        """
        validate_password(password)
        plaintext = encode_content(content)
        logger.info(
            f"Hiding {content.kind} content ({len(plaintext)} chars) in {cover.width}x{cover.height} image"
        )

        stego, ciphertext = embed_message(cover, plaintext, password, self.cipher_scheme)
        result = HideResult(
            width=cover.width,
            height=cover.height,
            used_capacity_bits=HEADER_BITS + 8 * len(ciphertext),
            capacity_bits=cover.capacity,
            ciphertext_chars=len(ciphertext),
            content_kind=ContentKind(content.kind),
            cipher=self.cipher_scheme,
        )
        return stego, result

    def hide_text(self, cover: CoverImage, text: str, password: str) -> Tuple[CoverImage, HideResult]:
        return self.hide(cover, PlainText(text=text), password)

    def hide_files(
        self,
        cover: CoverImage,
        files: Sequence[Tuple[str, str, bytes]],
        password: str,
    ) -> Tuple[CoverImage, HideResult]:
        """
        Hide one or more files as a JSON bundle

        Args:
            cover: Cover image
            files: Sequence of (name, mime_type, data)
            password: Password for encryption and pixel shuffling

        Returns:
            Tuple of (stego_image, result_metadata)
        """
        validate_files(files)
        return self.hide(cover, FileBundle.from_files(files), password)

    def reveal(self, stego: CoverImage, password: str) -> RevealResult:
        """
        Reveal hidden content from a stego image

        Args:
            stego: Image with hidden content
            password: Password used when hiding

        Returns:
            RevealResult with the decoded content

        Raises:
            StegoError: If the header is implausible, decryption fails
                or the content cannot be parsed
        """
        validate_password(password)
        logger.info(f"Revealing content from {stego.width}x{stego.height} image")

        order = pixel_order(stego, password)
        plaintext = extract_message(stego, password, self.cipher_scheme, order=order)
        content = decode_content(plaintext)
        return RevealResult(
            content=content,
            payload_bits=HEADER_BITS + read_header(stego, order),
            cipher=self.cipher_scheme,
        )
