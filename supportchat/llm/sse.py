"""
Incremental framing of ``text/event-stream`` response bodies.
"""

import codecs
from typing import List

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class SSELineFramer:
    """
    Turns arbitrarily split byte reads into complete ``data:`` payloads.

    A trailing partial line is buffered until the next read. Lines are split
    on ``\\n`` only; a trailing ``\\r`` is dropped. Lines without the data
    prefix (comments, keep-alives, blank separators) are ignored. Once the
    ``[DONE]`` sentinel is seen, ``done`` is set and later input is dropped.
    """

    def __init__(self, prefix: str = DATA_PREFIX, sentinel: str = DONE_SENTINEL):
        self.prefix = prefix
        self.sentinel = sentinel
        self.done = False
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, data: bytes | str) -> List[str]:
        """Consume one read and return the payloads of every completed line."""
        if self.done:
            return []
        if isinstance(data, bytes):
            data = self._decoder.decode(data)
        self._buffer += data

        *lines, self._buffer = self._buffer.split("\n")
        return self._extract(lines)

    def flush(self) -> List[str]:
        """Process whatever is buffered once the body has ended."""
        if self.done:
            return []
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return self._extract([tail]) if tail else []

    def _extract(self, lines: List[str]) -> List[str]:
        payloads = []
        for line in lines:
            line = line.rstrip("\r")
            if not line.startswith(self.prefix):
                continue
            payload = line[len(self.prefix):]
            if payload.strip() == self.sentinel:
                self.done = True
                break
            payloads.append(payload)
        return payloads
