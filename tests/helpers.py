"""
Test helper functions.
"""

from mp_psi import make_config
from mp_psi.party_a import state0, state2, state4
from mp_psi.party_b import state1, state3


def make_small_config(bin_count, **overrides):
    """Configuration with demo set sizes small enough for any bin count."""
    params = dict(bin_count=bin_count, sender_size=10, receiver_size=10, intersection_size=5)
    params.update(overrides)
    return make_config(**params)


def run_protocol(vector_a, vector_b, config):
    """
    Run the five stages in order with in-memory messages.

    Returns A's result and B's final outbound message.
    """
    out_a0 = state0(config)
    out_b1 = state1(out_a0.message, vector_b, config)
    out_a2 = state2(out_a0.private_state, out_a0.public_state, out_b1.message, vector_a)
    final_b = state3(out_b1.private_state, out_b1.public_state, out_a2.message)
    result = state4(out_a2.public_state, final_b, out_a2.private_state)
    return result, final_b
