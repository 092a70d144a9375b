"""Message sources feeding raw quote messages to the consumer."""

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import IO, Iterable, Iterator, Optional, Union

Payload = Union[bytes, str, None]


@dataclass(frozen=True)
class RawMessage:
    """One message as delivered by the transport."""
    payload: Payload    # None when the transport delivered no payload
    offset: int         # Position in the stream, used for acknowledgement


class MessageSource(ABC):
    """Base class for transports delivering raw feed messages."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"feed.source.{name}")
        self.acknowledged_offset: Optional[int] = None
        self.acknowledged_count = 0

    @abstractmethod
    def receive(self) -> Optional[RawMessage]:
        """
        Block until the next message is available.

        Returns:
            Next RawMessage, or None at end of stream
        """
        pass

    def acknowledge(self, message: RawMessage) -> None:
        """Mark a message as consumed so it is never redelivered."""
        self.acknowledged_offset = message.offset
        self.acknowledged_count += 1

    def open(self) -> None:
        """Acquire transport resources; failures surface before consuming starts."""
        pass

    def close(self) -> None:
        """Release transport resources."""
        pass

    def __enter__(self) -> "MessageSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class IterableMessageSource(MessageSource):
    """Source backed by any iterable of payloads."""

    def __init__(self, payloads: Iterable[Payload], name: str = "iterable"):
        super().__init__(name)
        self._payloads: Iterator[Payload] = iter(payloads)
        self._offset = 0

    def receive(self) -> Optional[RawMessage]:
        try:
            payload = next(self._payloads)
        except StopIteration:
            return None

        message = RawMessage(payload=payload, offset=self._offset)
        self._offset += 1
        return message


class FileMessageSource(MessageSource):
    """Source reading newline-delimited messages from a file or stdin."""

    def __init__(self, path: str = "-"):
        super().__init__("stdin" if path == "-" else "file")
        self.path = path
        self._stream: Optional[IO[bytes]] = None
        self._offset = 0

    def open(self) -> None:
        self._ensure_open()

    def _ensure_open(self) -> IO[bytes]:
        if self._stream is None:
            if self.path == "-":
                self._stream = sys.stdin.buffer
            else:
                self._stream = open(self.path, "rb")
            self.logger.info("Opened message source %s", self.path)
        return self._stream

    def receive(self) -> Optional[RawMessage]:
        line = self._ensure_open().readline()
        if not line:
            return None

        # Payloads are left as bytes; decoding is the consumer's concern
        payload = line.rstrip(b"\r\n")
        message = RawMessage(payload=payload if payload else None, offset=self._offset)
        self._offset += 1
        return message

    def close(self) -> None:
        if self._stream is not None and self.path != "-":
            self._stream.close()
        self._stream = None
