"""
IPFS Storage Gateway

StorageGateway over the IPFS (Kubo) HTTP RPC API:

    upload     POST /api/v0/add?pin=false      (multipart "file")
    fetch      POST /api/v0/cat?arg=<cid>
    pin        POST /api/v0/pin/add?arg=<cid>
    unpin      POST /api/v0/pin/rm?arg=<cid>
    is_pinned  POST /api/v0/pin/ls?arg=<cid>&type=recursive

Hosted gateways that require project credentials (Infura style) get them
as basic auth on every request; the pipeline never sees them.

Timeout and retry policy are applied here. Transient failures (transport
errors, timeouts, 5xx responses that are not definitive answers) are
retried up to max_retries times with a linear backoff; when retries are
exhausted a StorageUnavailableException is raised.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from core.config.runtime import StorageConfig
from core.http.client import HttpClient, HttpError, HttpResponse
from core.schemas.errors import ContentNotFoundException, StorageUnavailableException

from .gateway import PinResult, UploadResult


logger = logging.getLogger(__name__)


API_PREFIX = "/api/v0"

# Fragments of Kubo error messages that are definitive answers, not faults
_NOT_FOUND_MARKERS = ("not found", "no link named", "invalid path", "invalid cid", "failed to decode")
_NOT_PINNED_MARKERS = ("not pinned",)


def _error_message(response: HttpResponse) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "Message" in body:
        return str(body["Message"])
    return response.text


def _matches(message: str, markers: tuple[str, ...]) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in markers)


class IpfsStorageGateway:
    """
    Storage gateway backed by an IPFS node or hosted pinning service.

    Usage:
        gateway = IpfsStorageGateway.from_config(StorageConfig(api_url="http://127.0.0.1:5001"))
        result = gateway.upload(b'{"hello":"world"}')
        gateway.pin(result.cid)
    """

    def __init__(
        self,
        client: HttpClient,
        *,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: StorageConfig, *, proxy: Optional[str] = None) -> "IpfsStorageGateway":
        client = HttpClient(
            base_url=config.api_url,
            timeout=config.timeout,
            auth=config.auth,
            proxy=proxy,
        )
        return cls(
            client,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
        )

    # -------------------------------------------------------------------------
    # Transport with retries
    # -------------------------------------------------------------------------

    def _call(
        self,
        operation: str,
        endpoint: str,
        *,
        params: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
        definitive: Callable[[HttpResponse], bool] = lambda r: False,
    ) -> HttpResponse:
        """
        POST to an RPC endpoint, retrying transient failures.

        Returns the first 2xx response, or the first error response for
        which `definitive` is true (the caller interprets it).
        """
        attempts = self.max_retries + 1
        last_error = ""

        for attempt in range(1, attempts + 1):
            try:
                response = self.client.post(f"{API_PREFIX}/{endpoint}", params=params, files=files)
            except HttpError as e:
                last_error = str(e)
                kind = "timeout" if e.timed_out else "transport error"
                logger.warning(f"IPFS {operation} {kind} (attempt {attempt}/{attempts}): {e}")
            else:
                if response.ok or definitive(response):
                    return response
                last_error = f"HTTP {response.status_code}: {_error_message(response)[:200]}"
                if response.status_code < 500:
                    # Client errors will not succeed on retry
                    break
                logger.warning(f"IPFS {operation} failed (attempt {attempt}/{attempts}): {last_error}")

            if attempt < attempts:
                self._sleep(self.retry_delay * attempt)

        raise StorageUnavailableException(
            f"IPFS {operation} failed: {last_error}",
            operation=operation,
            details={"attempts": attempts},
        )

    @staticmethod
    def _json(response: HttpResponse, operation: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise StorageUnavailableException(
                f"IPFS {operation} returned a non-JSON body",
                operation=operation,
            ) from e
        if not isinstance(body, dict):
            raise StorageUnavailableException(
                f"IPFS {operation} returned an unexpected body",
                operation=operation,
            )
        return body

    # -------------------------------------------------------------------------
    # StorageGateway
    # -------------------------------------------------------------------------

    def upload(self, data: bytes) -> UploadResult:
        response = self._call(
            "upload",
            "add",
            params={"pin": "false", "cid-version": "0"},
            files={"file": ("record.json", data, "application/json")},
        )
        body = self._json(response, "upload")
        cid = body.get("Hash")
        if not cid:
            raise StorageUnavailableException("IPFS upload response carried no Hash", operation="upload")

        size = int(body.get("Size") or len(data))
        logger.info(f"Uploaded {size} bytes to IPFS: {cid}")
        return UploadResult(cid=cid, size=size)

    def fetch(self, cid: str) -> bytes:
        response = self._call(
            "fetch",
            "cat",
            params={"arg": cid},
            definitive=lambda r: r.status_code == 404 or _matches(_error_message(r), _NOT_FOUND_MARKERS),
        )
        if not response.ok:
            raise ContentNotFoundException(f"Content not found: {cid}", cid=cid)
        return response.content

    def pin(self, cid: str) -> PinResult:
        response = self._call("pin", "pin/add", params={"arg": cid})
        body = self._json(response, "pin")
        pinned = cid in (body.get("Pins") or [])
        if not pinned:
            raise StorageUnavailableException(
                f"IPFS did not confirm pin for {cid}",
                operation="pin",
                details={"response": body},
            )
        logger.info(f"Pinned IPFS content: {cid}")
        return PinResult(cid=cid, pinned=True)

    def unpin(self, cid: str) -> PinResult:
        response = self._call(
            "unpin",
            "pin/rm",
            params={"arg": cid},
            definitive=lambda r: _matches(_error_message(r), _NOT_PINNED_MARKERS),
        )
        if response.ok:
            logger.info(f"Unpinned IPFS content: {cid}")
        return PinResult(cid=cid, pinned=False)

    def is_pinned(self, cid: str) -> bool:
        response = self._call(
            "pin status",
            "pin/ls",
            params={"arg": cid, "type": "recursive"},
            definitive=lambda r: _matches(_error_message(r), _NOT_PINNED_MARKERS + _NOT_FOUND_MARKERS),
        )
        if not response.ok:
            return False
        keys = self._json(response, "pin status").get("Keys") or {}
        return cid in keys

    def close(self) -> None:
        self.client.close()
