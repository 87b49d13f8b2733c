"""
Solana JSON-RPC client: the three calls the burn scan needs, with retry.

Transient failures (HTTP 429, 5xx, transport errors, timeouts) are retried
with exponential backoff, honouring Retry-After. Permanent failures (other
non-2xx, JSON-RPC error payload, non-JSON body) are not retried.

call() never raises for remote failures: it logs and returns None so the
caller can skip one page or one transaction instead of aborting the scan.
request() raises RpcError for callers that want the failure.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import httpx

from burn_dashboard.burn_logging import get_logger
from burn_dashboard.config.env import mask_rpc_url
from burn_dashboard.core.exceptions import RpcError
from burn_dashboard.ledger.models import SignatureInfo, TokenSupply

logger = get_logger(__name__)

DEFAULT_MAX_RETRIES = 4
DEFAULT_REQUEST_TIMEOUT_SEC = 30.0
MIN_BACKOFF_SEC = 1.0

# JSON-RPC request id counter
_request_id = 0


def _next_id() -> int:
    global _request_id
    _request_id += 1
    return _request_id


def _retry_after_sec(resp: httpx.Response) -> float:
    raw = resp.headers.get("retry-after")
    if not raw:
        return 0.0
    try:
        return float(int(raw))
    except ValueError:
        return 0.0


def backoff_delay(attempt: int, retry_after: float = 0.0) -> float:
    """Seconds to wait before retry `attempt` (0-based): Retry-After, else 1, 2, 4, 8, ... never below 1s."""
    base = retry_after or float(2**attempt)
    return max(base, MIN_BACKOFF_SEC)


class _TransientError(Exception):
    def __init__(self, message: str, retry_after: float = 0.0) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class SolanaRpcClient:
    """
    Async JSON-RPC client bound to one endpoint.

    Use as an async context manager so the underlying httpx.AsyncClient is closed:

        async with SolanaRpcClient(url) as rpc:
            supply = await rpc.get_token_supply(mint)
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            rpc_url: Solana RPC HTTP endpoint (e.g. https://mainnet.helius-rpc.com/?api-key=...).
            max_retries: Retries after the first attempt for transient failures.
            request_timeout_sec: HTTP timeout for each RPC request.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
            sleep: Awaitable sleep used for backoff; injectable for tests.
        """
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if max_retries < 0:
            raise ValueError("max_retries must not be negative")
        self._rpc_url = rpc_url.strip()
        self._max_retries = max_retries
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(request_timeout_sec),
            transport=transport,
            headers={"content-type": "application/json"},
        )

    async def __aenter__(self) -> "SolanaRpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post_once(self, method: str, params: list[Any]) -> Any:
        body = {"jsonrpc": "2.0", "id": _next_id(), "method": method, "params": params}
        try:
            resp = await self._client.post(self._rpc_url, json=body)
        except httpx.TransportError as e:
            raise _TransientError(f"network error: {e!r}") from e

        if resp.status_code == 429 or resp.status_code >= 500:
            raise _TransientError(f"HTTP {resp.status_code}", _retry_after_sec(resp))
        if resp.is_error:
            raise RpcError(method, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise RpcError(method, f"invalid JSON body: {e}") from e
        if not isinstance(data, dict):
            raise RpcError(method, "unexpected response shape")
        err = data.get("error")
        if err:
            if isinstance(err, dict):
                raise RpcError(method, str(err.get("message", err)), err.get("code"))
            raise RpcError(method, str(err))
        return data.get("result")

    async def request(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call with retry; return `result` or raise RpcError."""
        last_error: _TransientError | None = None
        attempts = self._max_retries + 1
        for attempt in range(attempts):
            try:
                return await self._post_once(method, params)
            except _TransientError as e:
                last_error = e
                if attempt + 1 >= attempts:
                    break
                delay = backoff_delay(attempt, e.retry_after)
                logger.warning(
                    "rpc_retry",
                    method=method,
                    attempt=attempt + 1,
                    max_attempts=attempts,
                    delay_sec=delay,
                    error=str(e),
                )
                await self._sleep(delay)
        raise RpcError(method, f"gave up after {attempts} attempts: {last_error}")

    async def call(self, method: str, params: list[Any]) -> Any:
        """Like request(), but log and return None on failure."""
        try:
            return await self.request(method, params)
        except RpcError as e:
            logger.error("rpc_failed", method=method, code=e.code, error=str(e), rpc_url=mask_rpc_url(self._rpc_url))
            return None

    async def get_token_supply(self, mint: str) -> TokenSupply | None:
        result = await self.call("getTokenSupply", [mint])
        value = result.get("value") if isinstance(result, dict) else None
        if not isinstance(value, dict) or value.get("decimals") is None:
            return None
        try:
            return TokenSupply.from_rpc_value(value)
        except (TypeError, ValueError):
            logger.warning("token_supply_unparsable", mint=mint, value=value)
            return None

    async def get_signatures_for_address(
        self,
        address: str,
        *,
        limit: int,
        before: str | None = None,
    ) -> list[SignatureInfo] | None:
        """One page of signatures, newest first. None on RPC failure; [] when the history is exhausted."""
        opts: dict[str, Any] = {"limit": limit}
        if before is not None:
            opts["before"] = before
        try:
            result = await self.request("getSignaturesForAddress", [address, opts])
        except RpcError as e:
            logger.error("rpc_failed", method=e.method, code=e.code, error=str(e), rpc_url=mask_rpc_url(self._rpc_url))
            return None
        if result is None:
            return []
        if not isinstance(result, list):
            logger.warning("signatures_unexpected_shape", address=address)
            return None
        infos: list[SignatureInfo] = []
        for item in result:
            if not isinstance(item, dict) or not item.get("signature"):
                continue
            try:
                infos.append(SignatureInfo.from_rpc_item(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("signature_item_skipped", error=str(e))
        return infos

    async def get_transaction(self, signature: str) -> dict[str, Any] | None:
        """jsonParsed transaction record, or None when missing or on RPC failure."""
        result = await self.call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "commitment": "confirmed",
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )
        return result if isinstance(result, dict) else None
