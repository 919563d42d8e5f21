"""
Tests for message types and the JSON envelope.
"""

import json

import pytest
from pydantic import ValidationError

from mp_psi import (
    MalformedMessageError,
    MessageAToB1,
    MessageBToA1,
    MessageBToA2,
    bandwidth_report,
    decode_message,
    encode_message,
)
from mp_psi.messages import coerce_message, payload_size

SESSION = bytes(range(16))


def setup_message():
    return MessageAToB1(session_id=SESSION, bin_count=8, poly_modulus_degree=4096, plain_modulus=1032193)


class TestEnvelope:
    def test_binary_fields_survive_encoding(self):
        message = MessageBToA1(session_id=SESSION, public_context=b"\x00\xffctx", ciphertexts=[b"\x01", b"\x02\x03"])
        decoded = decode_message(encode_message(message))
        assert decoded == message
        assert decoded.ciphertexts[1] == b"\x02\x03"

    def test_kind_selects_type(self):
        assert isinstance(decode_message(encode_message(setup_message())), MessageAToB1)

    def test_wire_format_is_json(self):
        payload = json.loads(encode_message(setup_message()))
        assert payload["kind"] == "a_to_b_1"
        assert payload["version"] == 1

    def test_immutable(self):
        message = setup_message()
        with pytest.raises(ValidationError):
            message.bin_count = 16


class TestMalformed:
    def test_garbage(self):
        with pytest.raises(MalformedMessageError):
            decode_message(b"\x00not json")

    def test_unknown_kind(self):
        with pytest.raises(MalformedMessageError):
            decode_message(b'{"kind": "c_to_d", "session_id": ""}')

    def test_wrong_expected_type(self):
        with pytest.raises(MalformedMessageError):
            decode_message(encode_message(setup_message()), MessageBToA1)

    def test_short_session_id(self):
        with pytest.raises(ValidationError):
            MessageAToB1(session_id=b"abc", bin_count=8, poly_modulus_degree=4096, plain_modulus=1032193)

    def test_extra_fields_rejected(self):
        payload = json.loads(encode_message(setup_message()))
        payload["secret"] = "leak"
        with pytest.raises(MalformedMessageError):
            decode_message(json.dumps(payload))

    def test_unsupported_version(self):
        payload = json.loads(encode_message(setup_message()))
        payload["version"] = 2
        with pytest.raises(MalformedMessageError):
            decode_message(json.dumps(payload))

    def test_negative_share(self):
        with pytest.raises(ValidationError):
            MessageBToA2(session_id=SESSION, result_share=[1, -1])

    def test_coerce_rejects_other_objects(self):
        with pytest.raises(MalformedMessageError):
            coerce_message({"kind": "a_to_b_1"}, MessageAToB1)
        with pytest.raises(MalformedMessageError):
            coerce_message(setup_message(), MessageBToA2)


class TestBandwidth:
    def test_report(self):
        messages = [
            setup_message(),
            MessageBToA1(session_id=SESSION, public_context=b"c" * 10, ciphertexts=[b"x" * 5]),
            MessageBToA2(session_id=SESSION, result_share=[0, 1, 2]),
        ]
        report = bandwidth_report(messages)
        assert set(report) == {"a_to_b_1", "b_to_a_1", "b_to_a_2"}
        assert report["b_to_a_1"]["payload"] == 15
        assert report["b_to_a_2"]["payload"] == 24
        assert report["a_to_b_1"]["payload"] == 0
        assert all(sizes["serialized"] > 0 for sizes in report.values())

    def test_payload_size(self):
        assert payload_size(setup_message()) == 0
