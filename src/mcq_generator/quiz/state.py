"""Quiz state snapshots and the controller that owns them.

The controller is the only writer of quiz state. Every change produces a new
:class:`QuizState` (via :func:`dataclasses.replace`) and notifies
subscribers, so views only ever read immutable snapshots.

Questions arrive through :meth:`QuizController.ingest`, which reveals them
one at a time on an asyncio task. The task is wrapped in a
:class:`RevealHandle`; the controller keeps only the latest handle and
cancels it when the next generation begins.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Mapping

from mcq_generator.generation.models import Question, partition_records

logger = logging.getLogger("mcq_generator.quiz")

DEFAULT_REVEAL_INTERVAL = 0.1
NO_USABLE_QUESTIONS = "The model returned no usable questions. Try again."

Listener = Callable[["QuizState"], None]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class Score:
    correct: int
    total: int

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total

    def __str__(self) -> str:
        return f"{self.correct} / {self.total}"


@dataclass(frozen=True)
class QuizState:
    """Read-only snapshot of the quiz shown to the user."""

    questions: tuple[Question, ...] = ()
    answers: Mapping[int, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    practice_mode: bool = True
    loading: bool = False
    error: str | None = None

    def answer_for(self, index: int) -> str | None:
        return self.answers.get(index)


class RevealHandle:
    """Cancellation token for one progressive reveal."""

    def __init__(self, task: asyncio.Task[None], generation: int) -> None:
        self._task = task
        self.generation = generation

    def cancel(self) -> bool:
        return self._task.cancel()

    def cancelled(self) -> bool:
        return self._task.cancelled()

    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> None:
        """Wait for the reveal to finish or be cancelled, without raising."""
        await asyncio.wait({self._task})


class QuizController:
    def __init__(
        self,
        *,
        reveal_interval: float = DEFAULT_REVEAL_INTERVAL,
        practice_mode: bool = True,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.reveal_interval = reveal_interval
        self._sleep = sleep
        self._state = QuizState(practice_mode=practice_mode)
        self._listeners: list[Listener] = []
        self._reveal: RevealHandle | None = None
        self._generation = 0

    @property
    def state(self) -> QuizState:
        return self._state

    @property
    def reveal(self) -> RevealHandle | None:
        return self._reveal

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def begin_generation(self) -> None:
        self._generation += 1
        if self._reveal is not None and not self._reveal.done():
            logger.debug(
                "Cancelling reveal from generation %d",
                self._reveal.generation,
            )
            self._reveal.cancel()
        self._reveal = None
        self._set(
            QuizState(practice_mode=self._state.practice_mode, loading=True)
        )

    def fail(self, message: str) -> None:
        self._set(replace(self._state, loading=False, error=message))

    def ingest(self, raw_records: Iterable[Any]) -> RevealHandle:
        """Validate ``raw_records`` and start revealing the valid ones.

        Must be called from a running event loop.
        """

        valid, rejected = partition_records(raw_records)
        for record in rejected:
            logger.warning(
                "Skipped invalid MCQ", extra={"record": _preview(record)}
            )
        error = None if valid else NO_USABLE_QUESTIONS
        self._set(replace(self._state, loading=False, error=error))

        if self._reveal is not None and not self._reveal.done():
            self._reveal.cancel()
        generation = self._generation
        task = asyncio.get_running_loop().create_task(
            self._reveal_progressively(valid, generation)
        )
        self._reveal = RevealHandle(task, generation)
        return self._reveal

    async def _reveal_progressively(
        self, questions: list[Question], generation: int
    ) -> None:
        for question in questions:
            await self._sleep(self.reveal_interval)
            if generation != self._generation:
                return
            self._set(
                replace(
                    self._state,
                    questions=self._state.questions + (question,),
                )
            )
        logger.debug("Revealed %d question(s)", len(questions))

    def record_answer(self, index: int, key: str) -> bool:
        state = self._state
        if not state.practice_mode:
            return False
        if not 0 <= index < len(state.questions):
            return False
        if key not in state.questions[index].options:
            return False
        answers = dict(state.answers)
        answers[index] = key
        self._set(replace(state, answers=MappingProxyType(answers)))
        return True

    def score(self) -> Score:
        questions = self._state.questions
        correct = sum(
            1
            for index, key in self._state.answers.items()
            if index < len(questions) and questions[index].is_correct(key)
        )
        return Score(correct=correct, total=len(questions))

    def toggle_practice_mode(self) -> bool:
        enabled = not self._state.practice_mode
        self._set(replace(self._state, practice_mode=enabled))
        return enabled

    def _set(self, state: QuizState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)


def _preview(record: Any) -> str:
    text = repr(record)
    return text if len(text) <= 200 else text[:197] + "..."
