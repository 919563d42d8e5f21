from random import randrange, sample

from mp_psi.bitvector import BitVector
from mp_psi.errors import ConfigurationError

# Используем большое число
UNIVERSE_BOUND = 2147483629765874212


def generate_sets(sender_size, receiver_size, intersection_size, universe_bound=UNIVERSE_BOUND):
    """
    Генерирует sender_set и receiver_set с заданным размером пересечения.
    """
    if intersection_size > min(sender_size, receiver_size):
        raise ConfigurationError("Пересечение не может быть больше одного из множеств")

    # Создаем общий пул элементов для обоих множеств
    element_pool = sample(range(universe_bound), sender_size + receiver_size - intersection_size)

    intersection = element_pool[:intersection_size]

    sender_set = intersection + element_pool[intersection_size:sender_size]
    receiver_set = intersection + element_pool[sender_size:]
    return sender_set, receiver_set


def random_bit_vector(bin_count, hamming_weight) -> BitVector:
    """
    Случайный вектор: hamming_weight раз выбирается случайная корзина,
    поэтому число единиц может оказаться меньше hamming_weight
    """
    bits = [0] * bin_count
    for _ in range(hamming_weight):
        bits[randrange(bin_count)] = 1
    return BitVector(bits)


def plain_intersection(vector_a, vector_b) -> BitVector:
    """Пересечение в открытом виде, для проверки результата протокола"""
    return BitVector(vector_a) & BitVector(vector_b)
