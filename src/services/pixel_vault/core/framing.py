"""
Length-prefixed bit framing for ciphertext payloads
"""

import struct

import numpy as np

from ..models.vault_models import HEADER_BITS
from .errors import FramingError


MAX_BODY_BITS = 0xFFFFFFFF


def text_to_bits(text: str) -> np.ndarray:
    """
    Convert text to bits, one byte per character, most significant bit first

    Raises:
        FramingError: If a character does not fit in 8 bits
    """
    for position, char in enumerate(text):
        if ord(char) > 0xFF:
            raise FramingError(position, ord(char))
    return np.unpackbits(np.frombuffer(text.encode("latin-1"), dtype=np.uint8))


def bits_to_text(bits: np.ndarray) -> str:
    """
    Convert bits back to text, 8 bits per character

    A trailing group shorter than 8 bits is read as the integer it spells.
    """
    bits = np.asarray(bits, dtype=np.uint8)
    whole = len(bits) - len(bits) % 8
    text = np.packbits(bits[:whole]).tobytes().decode("latin-1")
    tail = bits[whole:]
    if len(tail):
        text += chr(int("".join(str(int(b)) for b in tail), 2))
    return text


def frame(ciphertext: str) -> np.ndarray:
    """
    Build the embedded bit sequence: 32-bit big-endian body length, then body

    Args:
        ciphertext: Printable ciphertext string

    Returns:
        Array of 0/1 values
    """
    body = text_to_bits(ciphertext)
    if len(body) > MAX_BODY_BITS:
        raise ValueError(f"Ciphertext of {len(ciphertext)} characters is too long to frame")
    header = np.unpackbits(np.frombuffer(struct.pack(">I", len(body)), dtype=np.uint8))
    return np.concatenate([header, body])


def unframe_header(bits: np.ndarray) -> int:
    """
    Parse the first 32 bits as a big-endian unsigned length

    Raises:
        ValueError: If fewer than 32 bits are given
    """
    bits = np.asarray(bits, dtype=np.uint8)
    if len(bits) < HEADER_BITS:
        raise ValueError(f"Header needs {HEADER_BITS} bits, got {len(bits)}")
    (length,) = struct.unpack(">I", np.packbits(bits[:HEADER_BITS]).tobytes())
    return length


def unframe_body(bits: np.ndarray, length: int) -> str:
    """
    Recover the ciphertext from body bits

    Args:
        bits: Body bits, at least `length` of them
        length: Body length in bits taken from the header

    Returns:
        Ciphertext string; bits beyond `length` are ignored
    """
    if length < 0 or len(bits) < length:
        raise ValueError(f"Body needs {length} bits, got {len(bits)}")
    return bits_to_text(bits[:length])
