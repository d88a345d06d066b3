from __future__ import annotations

import pytest
from hypothesis import given

from netquest.domain.errors import ContractViolation
from netquest.domain.types import DialogueLine, Speaker
from netquest.sim.dialogue import DialogueSequencer
from tests.helpers.strategies import dialogue_lines


def _line(line_id: str) -> DialogueLine:
    return DialogueLine(id=line_id, speaker=Speaker.NARRATOR, text=line_id.upper())


def test_advance_walks_the_batch_then_fires_once() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([_line("a"), _line("b"), _line("c")], lambda: calls.append("done"))

    assert seq.current().id == "a"
    assert seq.advance().id == "a"
    assert seq.current().id == "b"
    seq.advance()
    assert calls == []
    seq.advance()
    assert seq.current() is None
    assert calls == ["done"]
    assert seq.advance() is None
    assert calls == ["done"]


@given(dialogue_lines(), dialogue_lines())
def test_batches_concatenate(first: list[DialogueLine], second: list[DialogueLine]) -> None:
    seq = DialogueSequencer()
    seq.enqueue(first)
    seq.enqueue(second)
    assert list(seq.pending()) == first + second
    assert len(seq) == len(first) + len(second)


def test_second_handler_while_one_is_pending_is_refused() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([_line("a")], lambda: calls.append("first"))
    with pytest.raises(ContractViolation):
        seq.enqueue([_line("b")], lambda: calls.append("second"))

    assert [line.id for line in seq.pending()] == ["a"]
    seq.advance()
    assert calls == ["first"]
    assert not seq.awaiting_completion


def test_plain_lines_append_behind_the_handler() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([_line("a")], lambda: calls.append("done"))
    seq.enqueue([_line("b")])

    seq.advance()
    assert calls == []
    seq.advance()
    assert calls == ["done"]


def test_first_handler_after_plain_lines_takes_the_slot() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([_line("a")])
    assert not seq.awaiting_completion
    seq.enqueue([_line("b")], lambda: calls.append("done"))
    assert seq.awaiting_completion

    seq.advance()
    seq.advance()
    assert calls == ["done"]


def test_empty_batch_on_empty_queue_completes_immediately() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([], lambda: calls.append("done"))
    assert calls == ["done"]
    assert seq.is_empty()


def test_empty_batch_behind_pending_lines_waits() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([_line("a")])
    seq.enqueue([], lambda: calls.append("done"))
    assert calls == []
    seq.advance()
    assert calls == ["done"]


def test_no_stale_callback_after_drain() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([_line("a")], lambda: calls.append("old"))
    seq.advance()
    seq.enqueue([_line("b")])
    seq.advance()
    assert calls == ["old"]


def test_handler_may_enqueue_next_batch() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()

    def follow_up() -> None:
        calls.append("intro")
        seq.enqueue([_line("d")], lambda: calls.append("follow-up"))

    seq.enqueue([_line("c")], follow_up)
    seq.advance()
    assert seq.current().id == "d"
    assert calls == ["intro"]
    seq.advance()
    assert calls == ["intro", "follow-up"]
    assert seq.is_empty()


def test_clear_drops_lines_and_callbacks() -> None:
    calls: list[str] = []
    seq = DialogueSequencer()
    seq.enqueue([_line("a"), _line("b")], lambda: calls.append("done"))
    seq.clear()
    assert seq.is_empty()
    assert seq.advance() is None
    seq.enqueue([_line("c")])
    seq.advance()
    assert calls == []
