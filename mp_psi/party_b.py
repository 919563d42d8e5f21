"""
Сторона B: ответ на первый раунд (state1) и на второй (state3).
B не получает результата: её последний переход возвращает только сообщение.
"""

import logging

from mp_psi.bitvector import BitVector
from mp_psi.errors import ConfigurationError, MalformedMessageError, SessionMismatchError
from mp_psi.messages import MessageAToB1, MessageAToB2, MessageBToA1, MessageBToA2, coerce_message
from mp_psi.runtime import resolve_config
from mp_psi.state import PrivateStateB1, PublicStateB1, StageOutput, consume_pair
from mp_psi.utils import (
    TENSEAL_ERRORS,
    chunk_sizes,
    encrypt,
    load_ciphertext,
    load_secret_context,
    make_bfv_context,
    serialize_public_context,
    serialize_secret_context,
    session_tag,
    split_into_chunks,
    to_residues,
)

logger = logging.getLogger(__name__)


def _check_setup(message, config):
    """Параметры A должны совпадать с заранее согласованными параметрами B"""
    for name in ("bin_count", "poly_modulus_degree", "plain_modulus"):
        theirs, ours = getattr(message, name), getattr(config, name)
        if theirs != ours:
            raise ConfigurationError(f"Параметр {name} стороны A ({theirs}) не совпадает с локальным ({ours})")


def state1(message, bit_vector, config=None) -> StageOutput:
    """
    Генерация ключей BFV стороны B и шифрование её вектора.

    :param message: MessageAToB1 или его сериализованная форма
    :param bit_vector: вектор B длины bin_count
    :param config: локальная конфигурация B (по умолчанию - из среды выполнения)
    """
    config = resolve_config(config)
    message = coerce_message(message, MessageAToB1)
    _check_setup(message, config)

    bit_vector = BitVector(bit_vector)
    if len(bit_vector) != message.bin_count:
        raise ConfigurationError(
            f"Длина вектора B {len(bit_vector)} не совпадает с числом корзин {message.bin_count}"
        )

    ctx = make_bfv_context(message.poly_modulus_degree, message.plain_modulus)
    ciphertexts = [
        encrypt(ctx, chunk).serialize()
        for chunk in split_into_chunks(bit_vector, message.poly_modulus_degree)
    ]

    session_id = message.session_id
    private_state = PrivateStateB1(session_id=session_id, secret_context=serialize_secret_context(ctx))
    public_state = PublicStateB1(
        session_id=session_id,
        bin_count=message.bin_count,
        poly_modulus_degree=message.poly_modulus_degree,
        plain_modulus=message.plain_modulus,
    )
    outbound = MessageBToA1(
        session_id=session_id,
        public_context=serialize_public_context(ctx),
        ciphertexts=ciphertexts,
    )

    logger.info("[%s] B: зашифровано %d блоков вектора", session_tag(session_id), len(ciphertexts))
    return StageOutput(private_state, public_state, outbound)


def state3(private_b1, public_b1, message) -> MessageBToA2:
    """Расшифровка замаскированного произведения и отправка доли B стороне A"""
    consume_pair(private_b1, public_b1, PrivateStateB1, PublicStateB1)
    session_id = public_b1.session_id
    t = public_b1.plain_modulus

    message = coerce_message(message, MessageAToB2)
    if message.session_id != session_id:
        raise SessionMismatchError("Сообщение A относится к другому сеансу")

    sizes = chunk_sizes(public_b1.bin_count, public_b1.poly_modulus_degree)
    if len(message.ciphertexts) != len(sizes):
        raise MalformedMessageError(
            f"Получено {len(message.ciphertexts)} шифротекстов, ожидалось {len(sizes)}"
        )

    ctx = load_secret_context(private_b1.secret_context)
    share = []
    for ct, size in zip(message.ciphertexts, sizes):
        vector = load_ciphertext(ctx, ct, size)
        try:
            share.extend(to_residues(vector.decrypt(), t))
        except TENSEAL_ERRORS as e:
            raise MalformedMessageError(f"Не удалось расшифровать шифротекст A: {e}") from e

    logger.info("[%s] B: доля результата отправлена", session_tag(session_id))
    return MessageBToA2(session_id=session_id, result_share=share)
