"""Stream framing: split incoming text into complete LWCP messages.

Messages end at ``\\n``, except that a newline between ``%BeginEncap%`` and
the next ``%EndEncap%`` belongs to the encapsulated payload::

    drop studio.line#3 data=%BeginEncap%\\n%EndEncap%\\n
                                        ^ payload    ^ terminator

Text arrives in arbitrary fragments. Anything after the last complete
message stays buffered until more text is appended.
"""

from __future__ import annotations

import logging
from collections import deque

from ..models.message import MESSAGE_TERMINATOR, Message
from ..models.value import ENCAP_BEGIN, ENCAP_END
from .parser import ParseResult, parse_message

logger = logging.getLogger(__name__)

DEFAULT_MAX_REJECTED = 32


def find_message_end(buffer: str) -> int:
    """Return the index of the terminator ending the first message.

    Returns ``-1`` if the buffer does not hold a complete message yet,
    either because no terminator has arrived or because an encapsulated
    block is still open.
    """
    pos = 0
    while True:
        end = buffer.find(MESSAGE_TERMINATOR, pos)
        if end < 0:
            return -1
        # Skip over every encapsulated block that starts before this newline
        while True:
            begin = buffer.find(ENCAP_BEGIN, pos, end + 1)
            if begin < 0:
                return end
            close = buffer.find(ENCAP_END, begin)
            if close < 0:
                return -1
            pos = close + len(ENCAP_END)
            if pos > end:
                # The newline was inside the block; look for the next one
                break


class StreamFramer:
    """Accumulates stream text and queues the messages parsed from it.

    Usage::

        framer = StreamFramer()
        framer.feed(chunk)
        while (msg := framer.dequeue()) is not None:
            handle(msg)
    """

    def __init__(self, max_rejected: int = DEFAULT_MAX_REJECTED) -> None:
        self._buffer = ""
        self._messages: deque[Message] = deque()
        self.rejected: deque[ParseResult] = deque(maxlen=max_rejected)

    @property
    def pending(self) -> str:
        """Buffered text not yet framed into a message."""
        return self._buffer

    def append(self, text: str) -> None:
        self._buffer += text

    def next_message_text(self) -> str | None:
        """Remove and return the next complete message text (with terminator).

        Returns ``None`` when the buffered message is incomplete.
        """
        end = find_message_end(self._buffer)
        if end < 0:
            return None
        text = self._buffer[: end + 1]
        self._buffer = self._buffer[end + 1 :]
        return text

    def feed(self, text: str) -> int:
        """Append ``text`` and parse every message that is now complete.

        Returns:
            The number of messages added to the queue.
        """
        self.append(text)
        queued = 0
        while True:
            line = self.next_message_text()
            if line is None:
                break
            if not line.strip():
                continue
            result = parse_message(line)
            if result.message is None:
                logger.debug("Rejected message %r: %s", line, result.detail)
                self.rejected.append(result)
                continue
            self._messages.append(result.message)
            queued += 1
        return queued

    def dequeue(self) -> Message | None:
        """Pop the oldest parsed message, or ``None`` if the queue is empty."""
        if not self._messages:
            return None
        return self._messages.popleft()

    def dequeue_all(self) -> list[Message]:
        messages = list(self._messages)
        self._messages.clear()
        return messages

    def reset(self) -> None:
        """Discard buffered text, queued messages and rejections."""
        self._buffer = ""
        self._messages.clear()
        self.rejected.clear()

    def __len__(self) -> int:
        return len(self._messages)
