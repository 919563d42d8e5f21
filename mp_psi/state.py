"""
Состояния сторон между раундами.

Приватная часть никогда не покидает сторону и не попадает в сообщения,
публичная хранится локально и безопасна для отладочного просмотра.
Каждое состояние одноразовое: переход, который его принимает, помечает его
использованным, повторная передача вызывает StateReuseError.
"""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from mp_psi.errors import StateError, StateReuseError


class PartyState(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    session_id: bytes
    _consumed: bool = PrivateAttr(default=False)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self):
        if self._consumed:
            raise StateReuseError(f"{type(self).__name__} уже использовано")
        self._consumed = True


class SessionParams(PartyState):
    bin_count: int = Field(gt=0)
    poly_modulus_degree: int = Field(gt=0)
    plain_modulus: int = Field(gt=2)


class PrivateStateA0(PartyState):
    # Маска r, которой A скрывает произведение векторов от B
    mask: tuple[int, ...] = Field(repr=False)


class PublicStateA0(SessionParams):
    pass


class PrivateStateB1(PartyState):
    # Сериализованный контекст BFV с секретным ключом B
    secret_context: bytes = Field(repr=False)


class PublicStateB1(SessionParams):
    pass


class PrivateStateA2(PartyState):
    mask: tuple[int, ...] = Field(repr=False)


class PublicStateA2(SessionParams):
    pass


class StageOutput(NamedTuple):
    private_state: PartyState
    public_state: PartyState
    message: BaseModel


def consume_pair(private_state, public_state, private_type, public_type):
    """Проверка пары состояний одного раунда и пометка её использованной"""
    if not isinstance(private_state, private_type):
        raise StateError(
            f"Ожидалось {private_type.__name__}, получено {type(private_state).__name__}"
        )
    if not isinstance(public_state, public_type):
        raise StateError(
            f"Ожидалось {public_type.__name__}, получено {type(public_state).__name__}"
        )
    if private_state.session_id != public_state.session_id:
        raise StateError("Приватное и публичное состояния относятся к разным запускам")

    private_state.consume()
    public_state.consume()
