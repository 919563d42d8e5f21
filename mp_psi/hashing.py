import logging

import mmh3
import numpy as np

from mp_psi.bitvector import BitVector
from mp_psi.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Доля занятых корзин, после которой ложные срабатывания становятся заметными
DENSE_FILL_RATIO = 0.5


def _item_key(item):
    if isinstance(item, (bytes, bytearray)):
        return bytes(item)
    return str(item)


class BinHash:
    def __init__(self, bin_count: int, hash_seeds):
        """
        :param bin_count: число корзин (длина битового вектора)
        :param hash_seeds: список сидов для хеш-функций Murmur,
                           по одной корзине на каждую хеш-функцию
        """
        if bin_count < 1:
            raise ConfigurationError("bin_count должен быть положительным")
        if not hash_seeds:
            raise ConfigurationError("Нужен хотя бы один сид хеш-функции")
        self.bin_count = bin_count
        self.hash_seeds = list(hash_seeds)

    def locations(self, item) -> list[int]:
        """
        Вычисляет корзины элемента по всем хеш-функциям.
        :param item: элемент (int, str или bytes)
        :return: отсортированный список индексов корзин без повторов
        """
        key = _item_key(item)
        return sorted({
            mmh3.hash(key, seed, signed=False) % self.bin_count
            for seed in self.hash_seeds
        })

    def encode(self, items) -> BitVector:
        """Кодирование множества в битовый вектор. Коллизии не считаются ошибкой"""
        bits = np.zeros(self.bin_count, dtype=np.uint8)
        count = 0
        for item in items:
            bits[self.locations(item)] = 1
            count += 1

        filled = int(bits.sum())
        if filled > DENSE_FILL_RATIO * self.bin_count:
            logger.warning(
                "Заполнено %d из %d корзин: высокая вероятность ложных совпадений",
                filled, self.bin_count,
            )
        logger.debug("Закодировано %d элементов в %d корзин", count, filled)
        return BitVector(bits)

    def matches(self, vector, items) -> list:
        """
        Отбор собственных элементов, все корзины которых установлены в векторе
        (например, в результате пересечения).
        """
        vector = BitVector(vector)
        if len(vector) != self.bin_count:
            raise ConfigurationError(
                f"Длина вектора {len(vector)} не совпадает с числом корзин {self.bin_count}"
            )
        return [
            item for item in items
            if all(vector[loc] for loc in self.locations(item))
        ]


def encode(items, bin_count: int, hash_seeds) -> BitVector:
    return BinHash(bin_count, hash_seeds).encode(items)
