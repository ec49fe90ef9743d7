"""Tests for the response envelope and its decoder."""

import pytest

from neoroutine.core.exceptions import ApiEnvelopeError
from neoroutine.models.envelope import ApiEnvelope, decode_envelope


class TestDecodeEnvelope:
    def test_unwraps_data(self):
        payload = {"success": True, "message": "Success", "data": {"count": 2}}
        assert decode_envelope(payload) == {"count": 2}

    def test_unwrapped_payload_passes_through(self):
        assert decode_envelope({"count": 2}) == {"count": 2}
        assert decode_envelope([1, 2]) == [1, 2]

    def test_null_data(self):
        assert decode_envelope({"success": True, "message": "ok", "data": None}) is None

    def test_failure_raises_with_message(self):
        with pytest.raises(ApiEnvelopeError) as exc_info:
            decode_envelope({"success": False, "message": "Routine not found", "data": None}, 404)
        assert str(exc_info.value) == "Routine not found"
        assert exc_info.value.status_code == 404

    def test_error_status_with_detail(self):
        with pytest.raises(ApiEnvelopeError, match="Not Found"):
            decode_envelope({"detail": "Not Found"}, 404)

    def test_error_status_without_body(self):
        with pytest.raises(ApiEnvelopeError, match="HTTP 502"):
            decode_envelope(None, 502)


class TestApiEnvelope:
    def test_defaults(self):
        body = ApiEnvelope(data={"x": 1}).model_dump()
        assert body == {"success": True, "message": "Success", "data": {"x": 1}}

    def test_round_trip_through_decoder(self):
        body = ApiEnvelope(message="Badge awarded", data={"awarded": True}).model_dump()
        assert decode_envelope(body) == {"awarded": True}
