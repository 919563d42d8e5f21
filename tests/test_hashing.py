"""
Tests for the bin-vector codec.
"""

import logging

import pytest

from mp_psi import BinHash, ConfigurationError, encode

SEEDS = [123456789, 987654321, 192837465]


class TestEncode:
    def test_deterministic(self):
        items = [5, 17, 123456789012, "alice@example.com"]
        assert encode(items, 64, SEEDS) == encode(items, 64, SEEDS)

    def test_order_independent(self):
        items = list(range(20))
        assert encode(items, 128, SEEDS) == encode(reversed(items), 128, SEEDS)

    def test_length_is_bin_count(self):
        assert len(encode([1, 2, 3], 37, SEEDS)) == 37

    def test_empty_set(self):
        assert encode([], 16, SEEDS).count() == 0

    def test_bits_match_locations(self):
        hasher = BinHash(256, SEEDS)
        vector = hasher.encode([42])
        assert vector.indices() == hasher.locations(42)

    def test_collisions_are_not_errors(self):
        # Every item lands in the single bin
        assert encode([1, 2, 3], 1, SEEDS).to_string() == "1"

    def test_bytes_items(self):
        hasher = BinHash(512, SEEDS)
        assert hasher.locations(b"abc") == hasher.locations("abc")

    def test_invalid_parameters(self):
        with pytest.raises(ConfigurationError):
            BinHash(0, SEEDS)
        with pytest.raises(ConfigurationError):
            BinHash(16, [])

    def test_dense_vector_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mp_psi.hashing"):
            encode(range(50), 8, SEEDS)
        assert "ложных" in caplog.text


class TestLocations:
    def test_within_range(self):
        hasher = BinHash(100, SEEDS)
        for item in range(200):
            locations = hasher.locations(item)
            assert 1 <= len(locations) <= len(SEEDS)
            assert all(0 <= loc < 100 for loc in locations)


class TestMatches:
    def test_members_of_intersection_match(self):
        hasher = BinHash(4096, SEEDS)
        common = [1, 2, 3]
        vector_a = hasher.encode(common + [10, 11])
        vector_b = hasher.encode(common + [20, 21])
        matched = hasher.matches(vector_a & vector_b, common + [10, 11])
        assert set(common) <= set(matched)

    def test_length_mismatch(self):
        hasher = BinHash(16, SEEDS)
        with pytest.raises(ConfigurationError):
            hasher.matches("1010", [1])
