"""
Tests for configuration loading and validation.
"""

import pytest
from pydantic import ValidationError

from mp_psi import ConfigurationError, PSIConfig, load_config, make_config


class TestDefaultConfig:
    def test_packaged_yaml(self):
        config = load_config()
        assert config.bin_count == 4096
        assert config.poly_modulus_degree == 4096
        assert config.plain_modulus == 1032193
        assert config.number_of_hashes == 3
        assert config.num_chunks == 1

    def test_num_chunks(self):
        config = make_config(bin_count=5000, poly_modulus_degree=4096)
        assert config.slot_count == 4096
        assert config.num_chunks == 2

    def test_frozen(self):
        config = make_config(bin_count=8)
        with pytest.raises(ValidationError):
            config.bin_count = 16


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"bin_count": 0},
            {"poly_modulus_degree": 2048},
            {"plain_modulus": 65536},
            {"hash_seeds": []},
            {"hash_seeds": [1, 1]},
            {"hash_seeds": [2 ** 32]},
            {"sender_size": 5, "receiver_size": 5, "intersection_size": 6},
            {"log_level": "LOUD"},
            {"unknown_key": 1},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ConfigurationError):
            make_config(**overrides)

    def test_plain_modulus_must_allow_batching(self):
        # 1032193 ≡ 1 (mod 2n) only up to n = 8192
        make_config(poly_modulus_degree=8192)
        with pytest.raises(ConfigurationError):
            make_config(poly_modulus_degree=16384)


class TestLoadConfig:
    def test_custom_file(self, tmp_path):
        path = tmp_path / "psi.yaml"
        path.write_text("bin_count: 16\nhash_seeds: [1, 2]\n")
        config = load_config(str(path))
        assert config == PSIConfig(bin_count=16, hash_seeds=(1, 2))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "psi.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "psi.yaml"
        path.write_text("bin_count: [1, 2\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))
