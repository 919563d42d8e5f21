import logging
import os
from math import ceil

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from mp_psi.errors import ConfigurationError

# Путь к файлу config.yaml (относительно текущего файла)
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")

SUPPORTED_POLY_DEGREES = (4096, 8192, 16384, 32768)


class PSIConfig(BaseModel):
    """Параметры протокола, согласованные сторонами заранее"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bin_count: int = Field(4096, gt=0)
    poly_modulus_degree: int = 4096
    plain_modulus: int = 1032193
    hash_seeds: tuple[int, ...] = (123456789, 987654321, 192837465)

    sender_size: int = Field(200, ge=0)
    receiver_size: int = Field(100, ge=0)
    intersection_size: int = Field(30, ge=0)

    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_parameters(self):
        if self.poly_modulus_degree not in SUPPORTED_POLY_DEGREES:
            raise ValueError(
                f"poly_modulus_degree должен быть одним из {SUPPORTED_POLY_DEGREES}"
            )
        # Пакетное кодирование требует t ≡ 1 (mod 2n)
        if self.plain_modulus <= 2 or self.plain_modulus % (2 * self.poly_modulus_degree) != 1:
            raise ValueError("plain_modulus не поддерживает пакетное кодирование")

        if not self.hash_seeds:
            raise ValueError("Нужен хотя бы один сид хеш-функции")
        if len(set(self.hash_seeds)) != len(self.hash_seeds):
            raise ValueError("Сиды хеш-функций должны быть различны")
        if any(not 0 <= seed < 2 ** 32 for seed in self.hash_seeds):
            raise ValueError("Сиды хеш-функций должны помещаться в 32 бита")

        if self.intersection_size > min(self.sender_size, self.receiver_size):
            raise ValueError("intersection_size больше размера одного из множеств")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Неизвестный уровень логирования: {self.log_level}")
        return self

    @property
    def slot_count(self) -> int:
        """Число слотов открытого текста в одном шифротексте"""
        return self.poly_modulus_degree

    @property
    def num_chunks(self) -> int:
        return ceil(self.bin_count / self.slot_count)

    @property
    def number_of_hashes(self) -> int:
        return len(self.hash_seeds)


def make_config(**overrides) -> PSIConfig:
    """Создание конфигурации с переводом ошибок валидации в ConfigurationError"""
    try:
        return PSIConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Некорректная конфигурация: {e}") from e


def load_config(path=None) -> PSIConfig:
    """Загрузка конфигурации из YAML"""
    path = path or DEFAULT_CONFIG_PATH
    try:
        with open(path, "r") as file:
            data = yaml.safe_load(file)
    except OSError as e:
        raise ConfigurationError(f"Не удалось прочитать конфигурацию {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Файл {path} не является корректным YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Файл {path} должен содержать словарь параметров")
    return make_config(**data)
