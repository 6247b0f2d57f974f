"""Async operation protocol for Heketi mutating calls.

Heketi accepts a mutating request with ``202 Accepted`` and a
``Location`` header pointing at an operation handle. The handle is
polled until it resolves:

    SUBMITTED --202--> PENDING --200--> PENDING (wait, poll again)
                          |--303--> REDIRECTED --GET Location--> COMPLETED
                          |--204--> COMPLETED
                          |--500--> FAILED (operation failed remotely)
                          |--other--> FAILED (protocol violation)

Any status other than 202 on submission is a protocol violation.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Protocol

import httpx

from glustervol.core.errors import (
    OperationTimeoutError,
    ProtocolViolationError,
    RemoteOperationFailedError,
)
from glustervol.logging_schema import LogEvent

logger = logging.getLogger(__name__)


class OperationState(str, Enum):
    """States of a single async operation."""

    SUBMITTED = "submitted"
    PENDING = "pending"
    REDIRECTED = "redirected"
    COMPLETED = "completed"
    FAILED = "failed"


class SendRequest(Protocol):
    """Signs and sends one request, returning the raw response."""

    def __call__(
        self, method: str, endpoint: str, *, json: Any = None
    ) -> Awaitable[httpx.Response]: ...


def _location(response: httpx.Response) -> str:
    """Get the endpoint path a ``Location`` header points at.

    Raises:
        ProtocolViolationError: If the header is missing.
    """
    location = response.headers.get("Location")
    if not location:
        raise ProtocolViolationError(
            f"Missing Location header on {response.status_code} response"
        )
    url = httpx.URL(location)
    if url.is_absolute_url:
        return url.raw_path.decode("ascii")
    return location


class AsyncOperationPoller:
    """Drives one mutating call to a terminal result.

    Each poll goes through ``send``, so every request is freshly signed.
    The poll budget bounds how long a stuck operation is followed.
    """

    def __init__(
        self,
        send: SendRequest,
        *,
        interval: float = 1.0,
        max_polls: int = 600,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._send = send
        self._interval = interval
        self._max_polls = max_polls
        self._sleep = sleep
        self.state = OperationState.SUBMITTED

    async def run(self, method: str, endpoint: str, *, json: Any = None) -> httpx.Response:
        """Submit a mutating request and poll it to completion.

        Returns:
            The created resource (after a 303) or the 204 poll response.

        Raises:
            ProtocolViolationError: Unexpected status or missing Location.
            OperationTimeoutError: Poll budget exhausted.
            RemoteOperationFailedError: Operation failed server-side.
            TransportError: Propagated from ``send``.
        """
        self.state = OperationState.SUBMITTED
        try:
            return await self._run(method, endpoint, json)
        except Exception:
            self.state = OperationState.FAILED
            raise

    async def _run(self, method: str, endpoint: str, json: Any) -> httpx.Response:
        submitted = await self._send(method, endpoint, json=json)
        if submitted.status_code != httpx.codes.ACCEPTED:
            raise ProtocolViolationError(
                f"{method} {endpoint} returned {submitted.status_code}: {submitted.text}"
            )
        operation = _location(submitted)
        self.state = OperationState.PENDING
        logger.debug(
            "Operation accepted",
            extra={
                "event": LogEvent.OPERATION_SUBMITTED,
                "method": method,
                "endpoint": endpoint,
                "operation": operation,
            },
        )

        for poll in range(1, self._max_polls + 1):
            resp = await self._send("GET", operation)
            status = resp.status_code

            if status == httpx.codes.OK:
                logger.debug(
                    "Operation pending",
                    extra={
                        "event": LogEvent.OPERATION_PENDING,
                        "operation": operation,
                        "poll": poll,
                    },
                )
                if poll < self._max_polls:
                    await self._sleep(self._interval)
                continue

            if status == httpx.codes.SEE_OTHER:
                self.state = OperationState.REDIRECTED
                resource = _location(resp)
                result = await self._send("GET", resource)
                if not result.is_success:
                    raise ProtocolViolationError(
                        f"GET {resource} returned {result.status_code}: {result.text}"
                    )
                self._completed(operation, resource)
                return result

            if status == httpx.codes.NO_CONTENT:
                self._completed(operation, None)
                return resp

            if status == httpx.codes.INTERNAL_SERVER_ERROR:
                logger.warning(
                    "Operation failed",
                    extra={
                        "event": LogEvent.OPERATION_FAILED,
                        "operation": operation,
                        "status": status,
                    },
                )
                raise RemoteOperationFailedError(status, resp.text)

            raise ProtocolViolationError(
                f"Operation {operation} returned unexpected status {status}"
            )

        raise OperationTimeoutError(
            f"Operation {operation} still pending after {self._max_polls} polls"
        )

    def _completed(self, operation: str, resource: str | None) -> None:
        self.state = OperationState.COMPLETED
        logger.debug(
            "Operation completed",
            extra={
                "event": LogEvent.OPERATION_COMPLETED,
                "operation": operation,
                "resource": resource,
            },
        )
