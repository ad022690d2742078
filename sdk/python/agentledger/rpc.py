"""
JSON-RPC event source for a remote ledger substrate.

Reads the tip and log ranges over HTTP with automatic retry on transient
failures, using the httpx async client.
"""

import asyncio
import itertools
import os
import time
from collections.abc import Callable, Coroutine
from typing import Any

import httpx

from agentledger.exceptions import AgentLedgerError, ConfigurationError, SubstrateError
from agentledger.logging import log_rpc_request, log_rpc_response
from agentledger.retry import RetryConfig, backoff_delay
from agentledger.sources import EventSource
from agentledger.types.events import LogEntry, LogPosition


class RPCEventSource(EventSource):
    """
    EventSource that talks JSON-RPC 2.0 to a substrate node.

    Methods used:
    - ledger_blockNumber: returns the tip as an int or 0x-prefixed hex string
    - ledger_getLogs: params [{"fromBlock": n, "toBlock": m}], returns a list
      of {"blockNumber", "logIndex", "transactionHash", "topic", "data"}

    Example:
        ```python
        source = RPCEventSource("http://localhost:8545")
        monitor = EventMonitor(source)
        await monitor.start("latest", poll_interval_ms=2000)
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the RPC source.

        Args:
            url: JSON-RPC endpoint URL
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            transport: httpx transport to send requests through (default: network)
        """
        self.url = url
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self._ids = itertools.count(1)

        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_env(cls, retry_config: RetryConfig | None = None) -> "RPCEventSource":
        """
        Create a source from environment variables.

        Environment variables:
            AGENTLEDGER_RPC_URL: JSON-RPC endpoint (required)
            AGENTLEDGER_RPC_TIMEOUT: Request timeout in seconds (optional, default: 30)

        Raises:
            ConfigurationError: If the URL is missing or the timeout is not a positive number
        """
        url = os.environ.get("AGENTLEDGER_RPC_URL")
        if not url:
            raise ConfigurationError("AGENTLEDGER_RPC_URL environment variable not set")

        timeout_raw = os.environ.get("AGENTLEDGER_RPC_TIMEOUT")
        timeout = cls.DEFAULT_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid AGENTLEDGER_RPC_TIMEOUT: {timeout_raw}"
                ) from None
            if timeout <= 0:
                raise ConfigurationError("AGENTLEDGER_RPC_TIMEOUT must be positive")

        return cls(url=url, timeout=timeout, retry_config=retry_config)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "RPCEventSource":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def current_tip(self) -> int:
        result = await self.call("ledger_blockNumber", [])
        return _to_int(result, "blockNumber")

    async def read_range(self, from_block: int, to_block: int) -> list[LogEntry]:
        result = await self.call(
            "ledger_getLogs", [{"fromBlock": from_block, "toBlock": to_block}]
        )
        if not isinstance(result, list):
            raise SubstrateError("BAD_RESPONSE", "ledger_getLogs did not return a list")

        entries = [_parse_entry(raw) for raw in result]
        entries.sort(key=lambda entry: entry.position)
        return entries

    async def call(self, method: str, params: list[Any]) -> Any:
        """
        Make one JSON-RPC call with automatic retry.

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            The "result" member of the response

        Raises:
            SubstrateError: On RPC errors, non-retryable HTTP errors, or after max retries
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        async def make_request() -> httpx.Response:
            log_rpc_request(method, self.url, params)
            return await self._client.post(self.url, json=payload)

        data = await self._execute_with_retry(method, make_request)

        if "error" in data and data["error"] is not None:
            error = data["error"]
            raise SubstrateError(
                f"RPC_{error.get('code', 'ERROR')}",
                error.get("message", f"{method} failed"),
            )
        if "result" not in data:
            raise SubstrateError("BAD_RESPONSE", f"{method} response has no result")
        return data["result"]

    async def _execute_with_retry(
        self,
        method: str,
        request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]],
    ) -> dict[str, Any]:
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = await request_fn()
                elapsed_ms = (time.monotonic() - started) * 1000
                log_rpc_response(method, response.status_code, elapsed_ms)

                if response.status_code < 400:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise SubstrateError(
                            "BAD_RESPONSE", f"{method} returned invalid JSON"
                        ) from e

                error = SubstrateError(
                    f"HTTP_{response.status_code}",
                    f"{method} failed with HTTP {response.status_code}",
                )

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error
                retry_after = response.headers.get("Retry-After")
                await asyncio.sleep(backoff_delay(self.retry_config, attempt, retry_after))

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise SubstrateError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                await asyncio.sleep(backoff_delay(self.retry_config, attempt))

        if isinstance(last_error, AgentLedgerError):
            raise last_error
        raise SubstrateError("MAX_RETRIES_EXCEEDED", str(last_error))

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        if attempt >= self.retry_config.max_retries:
            return False
        return status_code in self.retry_config.retry_on


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise SubstrateError("BAD_RESPONSE", f"{name} is not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16) if value.startswith("0x") else int(value)
        except ValueError:
            pass
    raise SubstrateError("BAD_RESPONSE", f"{name} is not a number: {value!r}")


def _parse_entry(raw: Any) -> LogEntry:
    if not isinstance(raw, dict):
        raise SubstrateError("BAD_RESPONSE", f"Log entry is not an object: {raw!r}")
    try:
        return LogEntry(
            position=LogPosition(
                _to_int(raw["blockNumber"], "blockNumber"),
                _to_int(raw["logIndex"], "logIndex"),
            ),
            transaction_hash=str(raw["transactionHash"]),
            topic=str(raw["topic"]),
            data=str(raw["data"]),
        )
    except KeyError as e:
        raise SubstrateError("BAD_RESPONSE", f"Log entry is missing {e}") from None
