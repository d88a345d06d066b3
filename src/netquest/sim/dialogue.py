from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Iterable

from netquest.domain.errors import ContractViolation
from netquest.domain.types import DialogueLine

logger = logging.getLogger(__name__)

OnComplete = Callable[[], None]


class DialogueSequencer:
    """FIFO of dialogue lines with a single on-drain callback.

    The callback belongs to the batch that made the queue non-empty. If
    that batch brought none, the first later batch that supplies one
    before the drain takes the slot. Lines from later batches are always
    appended behind the pending ones.
    """

    def __init__(self) -> None:
        self._lines: deque[DialogueLine] = deque()
        self._on_drain: OnComplete | None = None

    def __len__(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    @property
    def awaiting_completion(self) -> bool:
        return self._on_drain is not None

    def current(self) -> DialogueLine | None:
        return self._lines[0] if self._lines else None

    def pending(self) -> tuple[DialogueLine, ...]:
        return tuple(self._lines)

    def enqueue(self, lines: Iterable[DialogueLine], on_complete: OnComplete | None = None) -> None:
        batch = list(lines)
        if not batch and not self._lines:
            # Nothing to read; the batch is complete already.
            if on_complete is not None:
                on_complete()
            return
        if on_complete is not None:
            if self._on_drain is not None:
                raise ContractViolation("A completion handler is already waiting on this dialogue")
            self._on_drain = on_complete
        self._lines.extend(batch)

    def advance(self) -> DialogueLine | None:
        if not self._lines:
            return None
        line = self._lines.popleft()
        if not self._lines and self._on_drain is not None:
            # Detach first so the handler may enqueue a fresh batch.
            callback, self._on_drain = self._on_drain, None
            logger.debug("Dialogue drained after %s", line.id)
            callback()
        return line

    def clear(self) -> None:
        """Drop pending lines and the callback without firing anything."""
        self._lines.clear()
        self._on_drain = None
