"""Persistent connection to the prediction endpoint."""
import json
import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from src.const import (
    CONTENT_TYPE_HEADER,
    CONTENT_TYPE_JSON,
    FEATURES_FIELD,
    MODEL_LATENCY_FIELD,
    PREDICTIONS_FIELD,
)
from .constants import BenchmarkConstants
from .exceptions import TransportError
from .models import PredictResult


# Configure logging
logger = logging.getLogger(__name__)

MAX_LATENCY_NS = 2 ** 64 - 1


def build_payload(batch_size: int) -> bytes:
    """Serialize the fixed request of batch_size identical feature records."""
    body = {FEATURES_FIELD: [BenchmarkConstants.FEATURE_RECORD] * batch_size}
    return json.dumps(body).encode("utf-8")


class ConnectionSession:
    """Issues prediction calls sequentially over one keep-alive connection.

    Nothing is retried: a failed call raises TransportError and the session
    is not reconnected.
    """

    def __init__(
        self,
        endpoint: str,
        batch_size: int,
        predict_path: str = "/predict",
        request_timeout: Optional[float] = None,
        http_session: Optional[requests.Session] = None,
    ):
        self.url = endpoint.rstrip("/") + predict_path
        self.request_timeout = request_timeout
        self._payload = build_payload(batch_size)
        self._headers = {CONTENT_TYPE_HEADER: CONTENT_TYPE_JSON}
        self._session = http_session or self._create_session()

    @staticmethod
    def _create_session() -> requests.Session:
        """Create a requests session limited to one pooled connection and no retries."""
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1, max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def payload(self) -> bytes:
        return self._payload

    def send(self) -> PredictResult:
        """
        Send the fixed prediction request.

        Returns:
            The decoded PredictResult.

        Raises:
            TransportError: If the connection or the call fails, or the
                response cannot be decoded.
        """
        try:
            response = self._session.post(
                self.url,
                data=self._payload,
                headers=self._headers,
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise TransportError(f"Request to {self.url} failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"Invalid response body from {self.url}") from e

        try:
            predictions = list(body.get(PREDICTIONS_FIELD, []))
            model_latency_ns = int(body[MODEL_LATENCY_FIELD])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise TransportError(
                f"Invalid response format from {self.url}: missing '{MODEL_LATENCY_FIELD}'"
            ) from e

        # Samples are stored in uint64 buffers
        if not 0 <= model_latency_ns <= MAX_LATENCY_NS:
            raise TransportError(
                f"Invalid response format from {self.url}: '{MODEL_LATENCY_FIELD}' out of range ({model_latency_ns})"
            )
        return PredictResult(predictions=predictions, model_latency_ns=model_latency_ns)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "ConnectionSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
