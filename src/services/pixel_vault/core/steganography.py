"""
Core steganography algorithms for shuffled LSB embedding and extraction

Payload bit k is stored in the least significant bit of channel k % 3
(R, G, B) of pixel order[k // 3], where order is the password-derived
pixel permutation. Alpha is never read or written.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from ..models.vault_models import CHANNELS_PER_PIXEL, HEADER_BITS, CipherScheme, CoverImage
from .encryption import decrypt, encrypt
from .errors import CapacityExceededError, HeaderReadError, InvalidLengthError, TruncatedPayloadError
from .framing import frame, unframe_body, unframe_header
from .permutation import shuffled_pixel_indices


logger = logging.getLogger(__name__)


def pixel_order(cover: CoverImage, password: str) -> np.ndarray:
    return shuffled_pixel_indices(cover.width, cover.height, password)


def bit_slots(order: np.ndarray, start: int, count: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map payload bit positions [start, start + count) to pixel and channel indices

    Args:
        order: Pixel visiting order
        start: First payload bit position
        count: Number of bit positions

    Returns:
        Tuple of (pixel_indices, channel_indices)
    """
    positions = np.arange(start, start + count, dtype=np.int64)
    return order[positions // CHANNELS_PER_PIXEL], positions % CHANNELS_PER_PIXEL


def embed_bits(cover: CoverImage, bits: np.ndarray, order: np.ndarray) -> CoverImage:
    """
    Write bits into channel LSBs following the pixel order

    Args:
        cover: Cover image
        bits: Payload bits (0/1 values)
        order: Pixel visiting order

    Returns:
        New image with the payload embedded

    Raises:
        CapacityExceededError: If the payload does not fit; nothing is written
    """
    capacity = cover.capacity
    if len(bits) > capacity:
        raise CapacityExceededError(required=len(bits), available=capacity)

    flat = np.array(cover.pixels).reshape(-1, 4)
    pixels, channels = bit_slots(order, 0, len(bits))
    flat[pixels, channels] = (flat[pixels, channels] & 0xFE) | np.asarray(bits, dtype=np.uint8)
    return CoverImage(flat.reshape(cover.pixels.shape))


def read_bits(cover: CoverImage, order: np.ndarray, start: int, count: int) -> np.ndarray:
    flat = cover.pixels.reshape(-1, 4)
    pixels, channels = bit_slots(order, start, count)
    return flat[pixels, channels] & 0x01


def read_header(cover: CoverImage, order: np.ndarray) -> int:
    """
    Read the 32-bit body length stored ahead of the body

    Raises:
        HeaderReadError: If the image holds fewer than 32 bits
    """
    capacity = cover.capacity
    if capacity < HEADER_BITS:
        raise HeaderReadError(available=capacity)
    return unframe_header(read_bits(cover, order, 0, HEADER_BITS))


def extract_bits(cover: CoverImage, order: np.ndarray) -> np.ndarray:
    """
    Read the length header, then exactly that many body bits

    The body starts at bit position 32, which falls two channels into
    the eleventh pixel of the order; reading continues from its B channel.

    Args:
        cover: Stego image
        order: Pixel visiting order

    Returns:
        Body bits

    Raises:
        HeaderReadError: If the image holds fewer than 32 bits
        InvalidLengthError: If the header length exceeds the capacity
        TruncatedPayloadError: If the body runs past the last pixel
    """
    capacity = cover.capacity
    length = read_header(cover, order)
    if length > capacity:
        raise InvalidLengthError(length=length, capacity=capacity)
    if HEADER_BITS + length > capacity:
        raise TruncatedPayloadError(required=HEADER_BITS + length, available=capacity)

    return read_bits(cover, order, HEADER_BITS, length)


def embed_message(
    cover: CoverImage,
    plaintext: str,
    password: str,
    scheme: CipherScheme = CipherScheme.AES_GCM,
    order: Optional[np.ndarray] = None,
) -> Tuple[CoverImage, str]:
    """
    Encrypt, frame and embed a message

    Args:
        cover: Cover image
        plaintext: Opaque message string
        password: Password for encryption and pixel shuffling
        scheme: Cipher envelope format
        order: Precomputed pixel order for this image and password

    Returns:
        Tuple of (stego_image, ciphertext)
    """
    ciphertext = encrypt(plaintext, password, scheme)
    payload = frame(ciphertext)
    if len(payload) > cover.capacity:
        raise CapacityExceededError(required=len(payload), available=cover.capacity)

    if order is None:
        order = pixel_order(cover, password)
    stego = embed_bits(cover, payload, order)
    logger.debug(f"Embedded {len(payload)} of {cover.capacity} bits into {cover.width}x{cover.height} image")
    return stego, ciphertext


def extract_ciphertext(cover: CoverImage, password: str, order: Optional[np.ndarray] = None) -> str:
    if order is None:
        order = pixel_order(cover, password)
    body = extract_bits(cover, order)
    return unframe_body(body, len(body))


def extract_message(
    cover: CoverImage,
    password: str,
    scheme: CipherScheme = CipherScheme.AES_GCM,
    order: Optional[np.ndarray] = None,
) -> str:
    """
    Extract and decrypt a message

    Args:
        cover: Stego image
        password: Password used when embedding
        scheme: Cipher envelope format
        order: Precomputed pixel order for this image and password

    Returns:
        Decrypted message string

    Raises:
        StegoError: Any header, length or decryption failure
    """
    ciphertext = extract_ciphertext(cover, password, order)
    return decrypt(ciphertext, password, scheme)
