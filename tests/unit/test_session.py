"""Unit tests for the connection session."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from src.loadtest.exceptions import TransportError
from src.loadtest.session import ConnectionSession, build_payload
from ..test_const import (
    TEST_ENDPOINT, TEST_PREDICT_URL, MODEL_LATENCY_NS,
    MOCK_PREDICT_RESPONSE, MOCK_PREDICT_RESPONSE_NO_LATENCY
)


def make_http_session(body=None):
    http_session = MagicMock()
    response = MagicMock()
    response.json.return_value = MOCK_PREDICT_RESPONSE if body is None else body
    http_session.post.return_value = response
    return http_session


class TestPayload:
    """Test the fixed request payload."""

    def test_batch_of_fixed_records(self):
        """The payload holds batch_size identical feature records."""
        body = json.loads(build_payload(3))
        assert len(body["features"]) == 3
        for record in body["features"]:
            assert record == {
                "float_feature1": 0.55,
                "float_feature2": 0.33,
                "cat_feature1": "A",
                "cat_feature2": "B",
                "cat_feature3": "C",
            }


class TestConnectionSession:
    """Test ConnectionSession request handling."""

    def test_send(self):
        """send posts the payload and decodes predictions and model latency."""
        http_session = make_http_session()
        session = ConnectionSession(TEST_ENDPOINT, 2, http_session=http_session)

        result = session.send()

        assert result.predictions == [0.42]
        assert result.model_latency_ns == MODEL_LATENCY_NS
        http_session.post.assert_called_once_with(
            TEST_PREDICT_URL,
            data=session.payload,
            headers={"content-type": "application/json"},
            timeout=None,
        )

    def test_payload_reused(self):
        """Every call sends the same payload object."""
        http_session = make_http_session()
        session = ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session)

        session.send()
        session.send()

        first, second = http_session.post.call_args_list
        assert first.kwargs["data"] is second.kwargs["data"]

    def test_custom_path_and_timeout(self):
        """predict_path and request_timeout come from the caller."""
        http_session = make_http_session()
        session = ConnectionSession(TEST_ENDPOINT + "/", 1, predict_path="/v1/score",
                                    request_timeout=2.5, http_session=http_session)
        session.send()

        args, kwargs = http_session.post.call_args
        assert args[0] == TEST_ENDPOINT + "/v1/score"
        assert kwargs["timeout"] == 2.5

    def test_connection_error(self):
        """Connection failures raise TransportError."""
        http_session = make_http_session()
        http_session.post.side_effect = requests.ConnectionError("refused")
        session = ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session)

        with pytest.raises(TransportError) as exc_info:
            session.send()
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_http_error_status(self):
        """Non-2xx responses raise TransportError."""
        http_session = make_http_session()
        http_session.post.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        session = ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session)

        with pytest.raises(TransportError):
            session.send()

    def test_invalid_json(self):
        """Undecodable bodies raise TransportError."""
        http_session = make_http_session()
        http_session.post.return_value.json.side_effect = ValueError("no json")
        session = ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session)

        with pytest.raises(TransportError):
            session.send()

    def test_missing_model_latency(self):
        """A response without model_latency raises TransportError."""
        http_session = make_http_session(MOCK_PREDICT_RESPONSE_NO_LATENCY)
        session = ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session)

        with pytest.raises(TransportError):
            session.send()

    def test_context_manager_closes(self):
        """Leaving the context closes the HTTP session."""
        http_session = make_http_session()
        with ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session):
            pass
        http_session.close.assert_called_once()

    def test_default_session_has_no_retries(self):
        """The default HTTP session never retries and pools one connection."""
        session = ConnectionSession(TEST_ENDPOINT, 1)
        adapter = session._session.get_adapter(TEST_ENDPOINT)

        assert adapter.max_retries.total == 0
        assert adapter._pool_maxsize == 1
        session.close()

    @pytest.mark.parametrize("model_latency", [-5, 2 ** 64])
    def test_model_latency_out_of_range(self, model_latency):
        """Latencies that do not fit a uint64 sample raise TransportError."""
        http_session = make_http_session({"predictions": [0.42], "model_latency": model_latency})
        session = ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session)

        with pytest.raises(TransportError):
            session.send()

    def test_model_latency_upper_bound(self):
        """The largest uint64 value is accepted."""
        http_session = make_http_session({"predictions": [], "model_latency": 2 ** 64 - 1})
        session = ConnectionSession(TEST_ENDPOINT, 1, http_session=http_session)

        assert session.send().model_latency_ns == 2 ** 64 - 1
