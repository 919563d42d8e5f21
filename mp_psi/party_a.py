"""
Сторона A: инициализация (state0), завершение первого раунда (state2)
и получение пересечения (state4). Только A узнаёт результат.
"""

import logging

import numpy as np

from mp_psi.bitvector import BitVector
from mp_psi.errors import ConfigurationError, MalformedMessageError, SessionMismatchError
from mp_psi.messages import MessageAToB1, MessageAToB2, MessageBToA1, MessageBToA2, coerce_message
from mp_psi.runtime import resolve_config
from mp_psi.state import (
    PrivateStateA0,
    PrivateStateA2,
    PublicStateA0,
    PublicStateA2,
    StageOutput,
    consume_pair,
)
from mp_psi.utils import (
    TENSEAL_ERRORS,
    chunk_sizes,
    encrypt_zeros,
    load_ciphertext,
    load_public_context,
    new_session_id,
    random_mask,
    session_tag,
    split_into_chunks,
    to_centered,
    unmask,
)

logger = logging.getLogger(__name__)


def state0(config=None) -> StageOutput:
    """
    Подготовка первого раунда: идентификатор сеанса и маска r.
    Вектор A на этом шаге не нужен.
    """
    config = resolve_config(config)

    session_id = new_session_id()
    mask = random_mask(config.bin_count, config.plain_modulus)

    params = dict(
        session_id=session_id,
        bin_count=config.bin_count,
        poly_modulus_degree=config.poly_modulus_degree,
        plain_modulus=config.plain_modulus,
    )
    private_state = PrivateStateA0(session_id=session_id, mask=tuple(mask))
    public_state = PublicStateA0(**params)
    message = MessageAToB1(**params)

    logger.info("[%s] A: сеанс открыт, %d корзин", session_tag(session_id), config.bin_count)
    return StageOutput(private_state, public_state, message)


def state2(private_a0, public_a0, message, bit_vector) -> StageOutput:
    """
    Вычисление Enc_B(vA * vB + r) по шифротекстам B и собственному вектору.

    :param private_a0: приватное состояние после state0
    :param public_a0: публичное состояние после state0
    :param message: MessageBToA1 или его сериализованная форма
    :param bit_vector: вектор A длины bin_count
    """
    consume_pair(private_a0, public_a0, PrivateStateA0, PublicStateA0)
    session_id = public_a0.session_id
    t = public_a0.plain_modulus

    bit_vector = BitVector(bit_vector)
    if len(bit_vector) != public_a0.bin_count:
        raise ConfigurationError(
            f"Длина вектора A {len(bit_vector)} не совпадает с числом корзин {public_a0.bin_count}"
        )

    message = coerce_message(message, MessageBToA1)
    if message.session_id != session_id:
        raise SessionMismatchError("Сообщение B относится к другому сеансу")

    sizes = chunk_sizes(public_a0.bin_count, public_a0.poly_modulus_degree)
    if len(message.ciphertexts) != len(sizes):
        raise MalformedMessageError(
            f"Получено {len(message.ciphertexts)} шифротекстов, ожидалось {len(sizes)}"
        )

    ctx_b = load_public_context(message.public_context)
    bit_chunks = split_into_chunks(bit_vector, public_a0.poly_modulus_degree)
    mask_chunks = split_into_chunks(private_a0.mask, public_a0.poly_modulus_degree)

    answer = []
    for ct, bits, mask, size in zip(message.ciphertexts, bit_chunks, mask_chunks, sizes):
        enc_b = load_ciphertext(ctx_b, ct, size)
        rerandomizer = encrypt_zeros(ctx_b, size)
        try:
            # vA * vB = vB * (vA + 1) - vB: открытый текст (vA + 1) не бывает нулевым,
            # поэтому все блоки вычисляются одинаково. Свежий шифротекст нуля
            # добавляется до вычитания, иначе для пустого блока результат «прозрачен»
            masked = enc_b * [bit + 1 for bit in bits]
            masked = masked + rerandomizer
            masked = masked + to_centered(mask, t)
            masked = masked - enc_b
        except TENSEAL_ERRORS as e:
            raise MalformedMessageError(f"Шифротекст B несовместим с параметрами сеанса: {e}") from e
        answer.append(masked.serialize())

    private_state = PrivateStateA2(session_id=session_id, mask=private_a0.mask)
    public_state = PublicStateA2(
        session_id=session_id,
        bin_count=public_a0.bin_count,
        poly_modulus_degree=public_a0.poly_modulus_degree,
        plain_modulus=t,
    )
    outbound = MessageAToB2(session_id=session_id, ciphertexts=answer)

    logger.info("[%s] A: отправлено %d шифротекстов", session_tag(session_id), len(answer))
    return StageOutput(private_state, public_state, outbound)


def state4(public_a2, message, private_a2) -> BitVector:
    """Снятие маски с доли B: результат (s_B - r) mod t должен состоять из битов"""
    consume_pair(private_a2, public_a2, PrivateStateA2, PublicStateA2)
    session_id = public_a2.session_id
    t = public_a2.plain_modulus

    message = coerce_message(message, MessageBToA2)
    if message.session_id != session_id:
        raise SessionMismatchError("Сообщение B относится к другому сеансу")

    shares = message.result_share
    if len(shares) != public_a2.bin_count:
        raise MalformedMessageError(
            f"Доля B содержит {len(shares)} значений, ожидалось {public_a2.bin_count}"
        )
    if max(shares) >= t:
        raise MalformedMessageError("Доля B выходит за пределы модуля открытого текста")

    bits = unmask(shares, private_a2.mask, t)
    if np.any(bits > 1):
        raise MalformedMessageError("Восстановленные значения не являются битами")

    result = BitVector(bits)
    logger.info(
        "[%s] A: пересечение содержит %d из %d корзин",
        session_tag(session_id), result.count(), len(result),
    )
    return result
