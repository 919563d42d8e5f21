from mp_psi.bitvector import BitVector
from mp_psi.config import PSIConfig, load_config, make_config
from mp_psi.errors import (
    ConfigurationError,
    MalformedMessageError,
    NotInitializedError,
    PSIError,
    RandomnessExhaustedError,
    SessionMismatchError,
    StateError,
    StateReuseError,
)
from mp_psi.hashing import BinHash, encode
from mp_psi.messages import (
    MessageAToB1,
    MessageAToB2,
    MessageBToA1,
    MessageBToA2,
    bandwidth_report,
    decode_message,
    encode_message,
)
from mp_psi.party_a import state0, state2, state4
from mp_psi.party_b import state1, state3
from mp_psi.runtime import initialize, is_initialized, shutdown
from mp_psi.state import StageOutput

__version__ = "0.1.0"
