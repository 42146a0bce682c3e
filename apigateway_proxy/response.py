"""
Response writer that captures a handler's output as an API Gateway envelope.
"""

import base64
import logging
from typing import Optional, Protocol, Union

from apigateway_proxy.datastructures import Headers
from apigateway_proxy.events import ProxyResponse
from apigateway_proxy.exceptions import ResponseFinalizedError

logger = logging.getLogger(__name__)


class ResponseWriter(Protocol):
    """What a handler may do with its response."""

    @property
    def headers(self) -> Headers: ...

    def set_header(self, name: str, value: str) -> None: ...

    def add_header(self, name: str, value: str) -> None: ...

    def set_status(self, status_code: int) -> None: ...

    def write(self, data: Union[bytes, str]) -> int: ...


class ResponseCapture:
    """
    Records status, headers and body written by a handler.

    One capture serves exactly one invocation. It is Open until finalize(),
    which renders the envelope once; any write after that raises
    ResponseFinalizedError since it can only be a bug in the handler.

    Headers are changed through set_header() and add_header() only; the
    ``headers`` property returns a copy.

    Example:
        w = ResponseCapture()
        w.set_header("Content-Type", "application/json")
        w.set_status(418)
        w.write(b'"Hello World"')
        envelope = w.finalize().to_lambda_response()
    """

    def __init__(self) -> None:
        self._headers = Headers()
        self._status_code: Optional[int] = None
        self._buffer = bytearray()
        self._binary = False
        self._rendered: Optional[ProxyResponse] = None

    @property
    def status_code(self) -> int:
        """Status written so far, 200 if none."""
        return self._status_code if self._status_code is not None else 200

    @property
    def headers(self) -> Headers:
        """Snapshot of the headers written so far."""
        return self._headers.copy()

    @property
    def finalized(self) -> bool:
        return self._rendered is not None

    def _check_open(self) -> None:
        if self._rendered is not None:
            raise ResponseFinalizedError("response already finalized")

    def set_header(self, name: str, value: str) -> None:
        """Set a header; the last value written wins."""
        self._check_open()
        self._headers.set(name, value)

    def add_header(self, name: str, value: str) -> None:
        """Append a header value, keeping earlier ones."""
        self._check_open()
        self._headers.add(name, value)

    def set_status(self, status_code: int) -> None:
        """Set the status code. Only the first call, or the first write, counts."""
        self._check_open()
        if self._status_code is not None:
            logger.warning(
                "Superfluous set_status call ignored",
                extra={"status_code": self._status_code, "ignored_status_code": status_code},
            )
            return
        self._status_code = status_code

    def write(self, data: Union[bytes, str]) -> int:
        """Append to the body; the first write fixes the status at 200 if unset."""
        self._check_open()
        if self._status_code is None:
            self._status_code = 200
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._buffer.extend(data)
        return len(data)

    def mark_binary(self) -> None:
        """Always send the body base64-encoded."""
        self._check_open()
        self._binary = True

    def finalize(self) -> ProxyResponse:
        """
        Render the envelope. Later calls return the same value.

        Content-Length is set from the body size unless the handler set it.
        """
        if self._rendered is not None:
            return self._rendered

        payload = bytes(self._buffer)
        if not self._headers.get("Content-Length"):
            self._headers.set("Content-Length", str(len(payload)))

        body: Optional[str] = None
        if not self._binary:
            try:
                body = payload.decode("utf-8")
            except UnicodeDecodeError:
                body = None

        if body is None:
            body = base64.b64encode(payload).decode("ascii")
            is_base64 = True
        else:
            is_base64 = False

        self._rendered = ProxyResponse(
            status_code=self.status_code,
            headers=self._headers.to_dict(),
            multi_value_headers=self._headers.to_multi_dict(),
            body=body,
            is_base64_encoded=is_base64,
        )
        return self._rendered
