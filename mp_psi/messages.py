"""
Сообщения протокола и их сериализация.

Четыре типа сообщений по раундам и направлениям:
A→B (раунд 1), B→A (раунд 1), A→B (раунд 2), B→A (раунд 2).
Каждое сообщение несёт идентификатор сеанса и только тот материал,
который нужен принимающему переходу. Сериализация: JSON, байтовые поля
кодируются в base64.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from mp_psi.errors import MalformedMessageError

PROTOCOL_VERSION = 1
SESSION_ID_BYTES = 16

SessionId = Annotated[bytes, Field(min_length=SESSION_ID_BYTES, max_length=SESSION_ID_BYTES)]
Blob = Annotated[bytes, Field(min_length=1)]


class Message(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    version: Literal[1] = PROTOCOL_VERSION
    session_id: SessionId


class MessageAToB1(Message):
    """Параметры сеанса, выбранные стороной A"""

    kind: Literal["a_to_b_1"] = "a_to_b_1"
    bin_count: int = Field(gt=0)
    poly_modulus_degree: int = Field(gt=0)
    plain_modulus: int = Field(gt=2)


class MessageBToA1(Message):
    """Публичный контекст BFV стороны B и шифротексты её вектора"""

    kind: Literal["b_to_a_1"] = "b_to_a_1"
    public_context: Blob
    ciphertexts: list[Blob] = Field(min_length=1)


class MessageAToB2(Message):
    """Замаскированное произведение векторов под ключом B"""

    kind: Literal["a_to_b_2"] = "a_to_b_2"
    ciphertexts: list[Blob] = Field(min_length=1)


class MessageBToA2(Message):
    """Аддитивная доля результата стороны B"""

    kind: Literal["b_to_a_2"] = "b_to_a_2"
    result_share: list[Annotated[int, Field(ge=0)]] = Field(min_length=1)


AnyMessage = Annotated[
    Union[MessageAToB1, MessageBToA1, MessageAToB2, MessageBToA2],
    Field(discriminator="kind"),
]

_message_adapter = TypeAdapter(AnyMessage)


def encode_message(message: Message) -> bytes:
    return message.model_dump_json().encode()


def decode_message(data, expected=None) -> Message:
    """
    Разбор сообщения из байтов или строки JSON.
    :param expected: ожидаемый тип сообщения (None - любой из четырёх)
    """
    try:
        message = _message_adapter.validate_json(data)
    except ValidationError as e:
        raise MalformedMessageError(f"Сообщение не прошло проверку: {e}") from e

    if expected is not None and not isinstance(message, expected):
        raise MalformedMessageError(
            f"Ожидалось сообщение {expected.__name__}, получено {type(message).__name__}"
        )
    return message


def coerce_message(message, expected):
    """Приведение входного значения перехода к ожидаемому типу сообщения"""
    if isinstance(message, (bytes, bytearray, str)):
        return decode_message(message, expected)
    if not isinstance(message, expected):
        raise MalformedMessageError(
            f"Ожидалось сообщение {expected.__name__}, получено {type(message).__name__}"
        )
    return message


def message_size(message: Message) -> int:
    """Размер сериализованного сообщения в байтах"""
    return len(encode_message(message))


def payload_size(message: Message) -> int:
    """Размер криптографического материала без обёртки JSON"""
    if isinstance(message, MessageBToA1):
        return len(message.public_context) + sum(len(ct) for ct in message.ciphertexts)
    if isinstance(message, MessageAToB2):
        return sum(len(ct) for ct in message.ciphertexts)
    if isinstance(message, MessageBToA2):
        # Доли не превосходят модуль открытого текста, 8 байт на корзину
        return 8 * len(message.result_share)
    return 0


def bandwidth_report(messages) -> dict:
    return {
        message.kind: {"serialized": message_size(message), "payload": payload_size(message)}
        for message in messages
    }
