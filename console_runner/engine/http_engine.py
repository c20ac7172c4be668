"""HTTP client for a remote test engine.

Implements the engine protocol over HTTP:
- POST /engine/explore              - Enumerate tests
- POST /engine/run                  - Start a test run
- GET  /engine/run/:id/events       - Poll run events
- GET  /engine/run/:id/result       - Retrieve the result tree

Requests are never retried: a transport failure surfaces to the caller.
"""

import time
from typing import Any, Optional

import requests

from ..errors import EngineConnectionError
from ..request.builder import ExecutionRequest
from ..request.filter import TestFilter
from .protocol import TestEventSink
from .results import EngineResult, TestEvent, parse_engine_result


RUN_FINISHED_STATES = {"completed", "failed"}


class HttpEngine:
    """Test engine reached through its HTTP agent."""

    def __init__(
        self,
        base_url: str,
        request_timeout: float = 30.0,
        poll_interval: float = 1.0,
    ):
        """Initialize HTTP engine client.

        Args:
            base_url: Base URL of the engine agent (e.g., http://127.0.0.1:8765).
            request_timeout: Timeout for a single HTTP request in seconds.
            poll_interval: Interval between event polls in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.poll_interval = poll_interval
        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def explore(self, request: ExecutionRequest, test_filter: TestFilter) -> EngineResult:
        """Enumerate matching tests.

        POST /engine/explore
        """
        data = self._request(
            "POST",
            "/engine/explore",
            json={"package": request.to_dict(), "filter": test_filter.to_dict()},
        )
        return parse_engine_result(data)

    def run(
        self,
        request: ExecutionRequest,
        event_sink: TestEventSink,
        test_filter: TestFilter,
    ) -> EngineResult:
        """Run matching tests, forwarding events to the sink until the run ends.

        Returns:
            EngineResult of the run.

        Raises:
            EngineConnectionError: If the engine agent is unreachable.
            requests.HTTPError: On HTTP errors without an error payload.
        """
        data = self._request(
            "POST",
            "/engine/run",
            json={"package": request.to_dict(), "filter": test_filter.to_dict()},
        )
        if data.get("errors"):
            return parse_engine_result(data)

        session_id = data.get("session_id")
        if not session_id:
            raise ValueError("Engine did not return a session_id for the run")

        received = 0
        while True:
            status = self._request(
                "GET",
                f"/engine/run/{session_id}/events",
                params={"since": received},
            )
            if status.get("errors"):
                return parse_engine_result(status)

            for event_data in status.get("events", []):
                event_sink.on_test_event(TestEvent.from_dict(event_data))
                received += 1

            if status.get("status") in RUN_FINISHED_STATES:
                break

            time.sleep(self.poll_interval)

        return parse_engine_result(
            self._request("GET", f"/engine/run/{session_id}/result")
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        """Send one request and decode its JSON body.

        Error responses whose body carries an ``errors`` list are returned
        as-is so they become error results.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(
                method, url, timeout=self.request_timeout, **kwargs
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise EngineConnectionError(f"Cannot reach test engine at {url}: {e}") from e

        if response.status_code >= 400:
            payload = _json_or_none(response)
            if isinstance(payload, dict) and payload.get("errors"):
                return payload
            response.raise_for_status()

        payload = _json_or_none(response)
        if not isinstance(payload, dict):
            raise ValueError(f"Engine returned a non-JSON response from {url}")
        return payload

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _json_or_none(response: requests.Response) -> Optional[Any]:
    try:
        return response.json()
    except ValueError:
        return None
