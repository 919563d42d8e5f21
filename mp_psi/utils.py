import secrets
from math import ceil

import numpy as np
import tenseal as ts

from mp_psi.config import SUPPORTED_POLY_DEGREES
from mp_psi.errors import (
    ConfigurationError,
    MalformedMessageError,
    RandomnessExhaustedError,
    StateError,
)
from mp_psi.messages import SESSION_ID_BYTES

# Ошибки, которыми TenSEAL сообщает о некорректных данных
TENSEAL_ERRORS = (ValueError, RuntimeError, TypeError)


def chunk_sizes(total, chunk_size):
    """
    Размеры блоков при разбиении total корзин на шифротексты по chunk_size слотов
    """
    count = ceil(total / chunk_size)
    return [min(chunk_size, total - i * chunk_size) for i in range(count)]


def split_into_chunks(values, chunk_size):
    values = list(values)
    return [values[i:i + chunk_size] for i in range(0, len(values), chunk_size)]


def new_session_id():
    try:
        return secrets.token_bytes(SESSION_ID_BYTES)
    except (OSError, NotImplementedError) as e:
        raise RandomnessExhaustedError("Источник случайности недоступен") from e


def random_mask(length, modulus):
    """Равномерная маска из Z_modulus длины length"""
    try:
        return [secrets.randbelow(modulus) for _ in range(length)]
    except (OSError, NotImplementedError) as e:
        raise RandomnessExhaustedError("Источник случайности недоступен") from e


def to_centered(values, modulus):
    """
    Перевод вычетов [0, t) в симметричное представление (-t/2, t/2],
    которое принимает пакетный кодировщик BFV
    """
    half = modulus // 2
    return [v - modulus if v > half else v for v in values]


def to_residues(values, modulus):
    """Приведение расшифрованных значений (возможно отрицательных) к [0, t)"""
    return (np.asarray(values, dtype=np.int64) % modulus).tolist()


def unmask(shares, mask, modulus):
    return (np.asarray(shares, dtype=np.int64) - np.asarray(mask, dtype=np.int64)) % modulus


def make_bfv_context(poly_modulus_degree, plain_modulus):
    """
    Создание контекста BFV с новой парой ключей.
    Параметры проверяются до генерации ключей: сбой самой генерации
    означает недоступность источника случайности.
    """
    if poly_modulus_degree not in SUPPORTED_POLY_DEGREES:
        raise ConfigurationError(f"Недопустимая степень полинома BFV: {poly_modulus_degree}")
    if plain_modulus <= 2 or plain_modulus % (2 * poly_modulus_degree) != 1:
        raise ConfigurationError(f"plain_modulus {plain_modulus} не поддерживает пакетное кодирование")
    try:
        return ts.context(
            ts.SCHEME_TYPE.BFV,
            poly_modulus_degree=poly_modulus_degree,
            plain_modulus=plain_modulus,
        )
    except TENSEAL_ERRORS as e:
        raise RandomnessExhaustedError(f"Не удалось сгенерировать ключи BFV: {e}") from e



def serialize_public_context(ctx):
    # Ключи релинеаризации и Галуа не нужны: используются только
    # умножение и сложение с открытым текстом
    return ctx.serialize(
        save_public_key=True,
        save_secret_key=False,
        save_galois_keys=False,
        save_relin_keys=False,
    )


def serialize_secret_context(ctx):
    return ctx.serialize(
        save_public_key=True,
        save_secret_key=True,
        save_galois_keys=False,
        save_relin_keys=False,
    )


def load_public_context(data):
    """Загрузка публичного контекста, полученного от другой стороны"""
    try:
        ctx = ts.context_from(data)
    except TENSEAL_ERRORS as e:
        raise MalformedMessageError(f"Не удалось загрузить контекст BFV: {e}") from e
    if not ctx.is_public():
        raise MalformedMessageError("Полученный контекст содержит секретный ключ")
    return ctx


def load_secret_context(data):
    """Восстановление собственного контекста стороны из приватного состояния"""
    try:
        return ts.context_from(data)
    except TENSEAL_ERRORS as e:
        raise StateError(f"Приватное состояние повреждено: {e}") from e


def load_ciphertext(ctx, data, expected_size):
    try:
        vector = ts.bfv_vector_from(ctx, data)
    except TENSEAL_ERRORS as e:
        raise MalformedMessageError(f"Не удалось загрузить шифротекст: {e}") from e
    if vector.size() != expected_size:
        raise MalformedMessageError(
            f"Шифротекст содержит {vector.size()} слотов, ожидалось {expected_size}"
        )
    return vector


def encrypt(ctx, values):
    """Шифрование открытым ключом контекста, каждый вызов расходует свежую случайность"""
    try:
        return ts.bfv_vector(ctx, list(values))
    except TENSEAL_ERRORS as e:
        raise RandomnessExhaustedError(f"Не удалось зашифровать вектор: {e}") from e


def encrypt_zeros(ctx, size):
    """Свежее шифрование нулей для перерандомизации шифротекста"""
    return encrypt(ctx, [0] * size)


def session_tag(session_id):
    """Короткий префикс идентификатора сеанса для логов"""
    return session_id.hex()[:8]
