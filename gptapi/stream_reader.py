"""Reading of server-sent event streams returned by streaming endpoints."""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from gptapi.transport import APIError, Response

DEFAULT_EMPTY_MESSAGES_LIMIT = 300

_DATA_FIELD = b"data"
_ERROR_PREFIX = b'{"error":'
_DONE = b"[DONE]"


class TooManyEmptyStreamMessagesError(Exception):
    """The stream sent more non-data lines in a row than allowed."""

    def __init__(self) -> None:
        super().__init__("stream has sent too many empty messages")


class StreamAPIError(APIError):
    """An API error delivered inside an event stream."""


class StreamReader:
    """Reads ``data:`` events from a server-sent event stream.

    ``source`` is a :class:`Response`, the raw body bytes, or an iterable of
    byte lines that keep their trailing newline. ``error_buffer`` must offer
    ``write`` and ``getvalue``; it collects lines that carry no data, which
    are decoded as an API error when the stream ends.
    """

    def __init__(
        self,
        source: Response | bytes | Iterable[bytes],
        *,
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        decoder: Callable[[bytes], Any] = json.loads,
        error_buffer: Any = None,
        on_close: Callable[[], Any] | None = None,
    ) -> None:
        self.headers: dict[str, str] = {}
        if isinstance(source, Response):
            self.headers = dict(source.headers)
            source = source.body
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))
        self._lines: Iterator[bytes] = iter(source)
        self._limit = empty_messages_limit
        self._decoder = decoder
        self._error_buffer = io.BytesIO() if error_buffer is None else error_buffer
        self._on_close = on_close
        self._finished = False
        self.closed = False

    def recv(self) -> Any:
        """Return the next decoded event; raise :class:`EOFError` at the end."""
        return self._decoder(self.recv_raw())

    def recv_raw(self) -> bytes:
        """Return the next event payload undecoded; raise :class:`EOFError` at the end."""
        if self._finished:
            raise EOFError("stream finished")
        return self._process_lines()

    def _process_lines(self) -> bytes:
        empty_count = 0
        has_error_prefix = False
        while True:
            raw = next(self._lines, None)
            if raw is None or not raw.endswith(b"\n") or has_error_prefix:
                error = self._unmarshal_error()
                if error is not None:
                    raise error
                raise EOFError("end of stream")

            line = raw.strip()
            key, sep, rest = line.partition(b":")
            if sep and key == _DATA_FIELD:
                value = rest[1:] if rest.startswith(b" ") else rest
                has_error_prefix = value.startswith(_ERROR_PREFIX)
                if not has_error_prefix:
                    if value == _DONE:
                        self._finished = True
                        raise EOFError("stream finished")
                    return value
                self._error_buffer.write(value)
            else:
                self._error_buffer.write(line)

            empty_count += 1
            if empty_count > self._limit:
                raise TooManyEmptyStreamMessagesError()

    def _unmarshal_error(self) -> StreamAPIError | None:
        data = self._error_buffer.getvalue()
        if not data:
            return None
        try:
            payload = self._decoder(data)
        except Exception:
            return None
        if not isinstance(payload, dict) or not isinstance(payload.get("error"), dict):
            return None
        err = payload["error"]
        message = str(err.get("message") or "")
        return StreamAPIError(
            f"error, {message}",
            type=err.get("type") or "",
            code=err.get("code"),
            param=err.get("param"),
        )

    def close(self) -> None:
        """Release the underlying stream."""
        if not self.closed:
            self.closed = True
            if self._on_close is not None:
                self._on_close()

    def __iter__(self) -> Iterator[Any]:
        while True:
            try:
                item = self.recv()
            except EOFError:
                return
            yield item

    def __enter__(self) -> StreamReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()