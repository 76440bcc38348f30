"""
Password-seeded pixel ordering

The order must be reproduced bit for bit by every encoder and decoder,
so all generator arithmetic is unsigned 32-bit with wraparound.
"""

import hashlib
from typing import List

import numpy as np


MASK32 = 0xFFFFFFFF
TWO_POW_32 = 4294967296


def imul32(a: int, b: int) -> int:
    """Multiply two integers keeping the low 32 bits"""
    return (a * b) & MASK32


def rotl32(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & MASK32


def password_digest(password: str) -> str:
    """Lowercase hex SHA-256 of the UTF-8 password"""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class SeededRandom:
    """
    Deterministic float generator in [0, 1) seeded from a string

    Each instance owns its 32-bit state, so independent orders can be
    derived side by side without interfering.
    """

    def __init__(self, seed: str):
        h = 1779033703 ^ len(seed)
        for char in seed:
            h = imul32(h ^ ord(char), 3432918353)
            h = rotl32(h, 13)
        self._state = h

    @property
    def state(self) -> int:
        return self._state

    def next_uint32(self) -> int:
        h = self._state
        h = imul32(h ^ (h >> 16), 2246822507)
        h = imul32(h ^ (h >> 13), 3266489909)
        h ^= h >> 16
        self._state = h
        return h

    def random(self) -> float:
        return self.next_uint32() / TWO_POW_32


def shuffle_in_place(items: List[int], rng: SeededRandom) -> None:
    """Fisher-Yates from the last element down to index 1"""
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        items[i], items[j] = items[j], items[i]


def shuffled_pixel_indices(width: int, height: int, password: str) -> np.ndarray:
    """
    Derive the pixel visiting order for an image

    Args:
        width: Image width in pixels
        height: Image height in pixels
        password: Password that seeds the shuffle

    Returns:
        Array holding a permutation of range(width * height)
    """
    if width < 0 or height < 0:
        raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
    indices = list(range(width * height))
    shuffle_in_place(indices, SeededRandom(password_digest(password)))
    return np.array(indices, dtype=np.int64)
