"""
Unit tests for the password-seeded pixel order
"""

import hashlib

import numpy as np
import pytest

from src.services.pixel_vault.core.permutation import (
    SeededRandom,
    imul32,
    password_digest,
    rotl32,
    shuffle_in_place,
    shuffled_pixel_indices,
)


def _to_int32(value):
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _js_imul(a, b):
    return _to_int32((a & 0xFFFFFFFF) * (b & 0xFFFFFFFF))


def _js_unsigned_shift(value, shift):
    return (value & 0xFFFFFFFF) >> shift


def _js_reference_order(width, height, password):
    """Signed 32-bit rendition of the generator, the way a browser evaluates it."""
    seed = hashlib.sha256(password.encode("utf-8")).hexdigest()
    h = _to_int32(1779033703 ^ len(seed))
    for char in seed:
        h = _js_imul(h ^ ord(char), 3432918353)
        h = _to_int32((h << 13) | _js_unsigned_shift(h, 19))

    def rng():
        nonlocal h
        h = _js_imul(h ^ _js_unsigned_shift(h, 16), 2246822507)
        h = _js_imul(h ^ _js_unsigned_shift(h, 13), 3266489909)
        h = _to_int32(h ^ _js_unsigned_shift(h, 16))
        return (h & 0xFFFFFFFF) / 4294967296

    indices = list(range(width * height))
    for i in range(len(indices) - 1, 0, -1):
        j = int(rng() * (i + 1))
        indices[i], indices[j] = indices[j], indices[i]
    return indices


class TestArithmetic:
    """32-bit helpers"""

    def test_imul32_wraps(self):
        assert imul32(0xFFFFFFFF, 2) == 0xFFFFFFFE
        assert imul32(0x10000, 0x10000) == 0
        assert imul32(3, 5) == 15

    def test_rotl32(self):
        assert rotl32(0x80000000, 1) == 1
        assert rotl32(1, 13) == 1 << 13
        assert rotl32(0xFFFFFFFF, 13) == 0xFFFFFFFF
        assert rotl32(0x00080000, 13) == 1

    def test_password_digest_is_lowercase_hex(self):
        digest = password_digest("secret")
        assert digest == hashlib.sha256(b"secret").hexdigest()
        assert len(digest) == 64
        assert digest == digest.lower()


class TestSeededRandom:
    """Stateful generator"""

    def test_outputs_are_in_unit_interval(self):
        rng = SeededRandom(password_digest("pw"))
        values = [rng.random() for _ in range(2000)]
        assert all(0.0 <= v < 1.0 for v in values)
        assert len(set(values)) > 1990

    def test_same_seed_same_sequence(self):
        a = SeededRandom("seed")
        b = SeededRandom("seed")
        assert [a.next_uint32() for _ in range(50)] == [b.next_uint32() for _ in range(50)]

    def test_state_stays_32_bit(self):
        rng = SeededRandom("x" * 100)
        for _ in range(500):
            rng.next_uint32()
            assert 0 <= rng.state <= 0xFFFFFFFF

    def test_generators_do_not_share_state(self):
        a = SeededRandom("seed")
        b = SeededRandom("seed")
        first_a = a.next_uint32()
        for _ in range(10):
            b.next_uint32()
        fresh = SeededRandom("seed")
        assert first_a == fresh.next_uint32()
        assert a.next_uint32() == fresh.next_uint32()

    def test_empty_seed_initial_state(self):
        assert SeededRandom("").state == 1779033703


class TestShuffledPixelIndices:
    """Pixel order derivation"""

    def test_is_a_permutation(self):
        order = shuffled_pixel_indices(37, 23, "password")
        assert len(order) == 37 * 23
        assert np.array_equal(np.sort(order), np.arange(37 * 23))

    def test_is_deterministic(self):
        first = shuffled_pixel_indices(50, 40, "hunter2")
        second = shuffled_pixel_indices(50, 40, "hunter2")
        assert np.array_equal(first, second)

    @pytest.mark.parametrize("width,height,password", [
        (50, 40, "hunter3"),
        (51, 40, "hunter2"),
        (50, 40, "Hunter2"),
    ])
    def test_changes_with_any_input(self, width, height, password):
        base = shuffled_pixel_indices(50, 40, "hunter2")
        other = shuffled_pixel_indices(width, height, password)
        assert len(base) != len(other) or not np.array_equal(base, other)

    def test_depends_on_pixel_count_not_aspect(self):
        assert np.array_equal(shuffled_pixel_indices(50, 40, "pw"), shuffled_pixel_indices(40, 50, "pw"))

    def test_actually_shuffles(self):
        order = shuffled_pixel_indices(30, 30, "pw")
        assert not np.array_equal(order, np.arange(900))

    @pytest.mark.parametrize("width,height,password", [
        (16, 16, "password"),
        (7, 13, "ünïcødé 🔑"),
        (1, 200, ""),
    ])
    def test_matches_signed_reference(self, width, height, password):
        expected = _js_reference_order(width, height, password)
        assert shuffled_pixel_indices(width, height, password).tolist() == expected

    def test_degenerate_sizes(self):
        assert shuffled_pixel_indices(0, 10, "pw").tolist() == []
        assert shuffled_pixel_indices(1, 1, "pw").tolist() == [0]

    def test_negative_dimensions_rejected(self):
        with pytest.raises(ValueError):
            shuffled_pixel_indices(-1, 5, "pw")

    def test_shuffle_in_place_uses_given_generator(self):
        items = list(range(10))
        shuffle_in_place(items, SeededRandom("abc"))
        again = list(range(10))
        shuffle_in_place(again, SeededRandom("abc"))
        assert items == again
        assert sorted(items) == list(range(10))
