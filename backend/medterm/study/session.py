"""
Study session engine.

One pass over a card set: a card answered "knew it" graduates and leaves the
rotation, a missed card goes to the back of the queue. The pass is complete
once every card has graduated.

State flow:
  start -> AWAITING_REVEAL -reveal-> ANSWER_SHOWN -grade-> TRANSITIONING
        -(delay)-> AWAITING_REVEAL | COMPLETE

The post-grade pause is the only deferred step. Its callback is bound to the
session id and grade generation, so a timer that outlives its session does
nothing.

If no timer can be scheduled (no running event loop), the advance runs at
once and the grade still counts.
"""
from __future__ import annotations

import logging
import random
import uuid
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from medterm.models.flashcard import FlashcardItem, SessionState
from medterm.study.scheduler import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_TRANSITION_DELAY = 1.5  # seconds


class StudyError(Exception):
    """A study request the caller can correct (reported, never a crash)."""


class EmptyCardSetError(StudyError):
    def __init__(self) -> None:
        super().__init__("Cannot start a study session without cards")


@dataclass
class StudySession:
    all_cards: tuple[FlashcardItem, ...]
    remaining_cards: deque[FlashcardItem]
    correct_cards: list[FlashcardItem] = field(default_factory=list)
    current_card: FlashcardItem | None = None
    show_answer: bool = False
    is_transitioning: bool = False
    correct_count: int = 0
    total_reviews: int = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    generation: int = 0

    @property
    def state(self) -> SessionState:
        if self.current_card is None:
            return SessionState.COMPLETE
        if self.is_transitioning:
            return SessionState.TRANSITIONING
        if self.show_answer:
            return SessionState.ANSWER_SHOWN
        return SessionState.AWAITING_REVEAL

    @property
    def is_complete(self) -> bool:
        return self.current_card is None


class StudySessionEngine:
    """Owns at most one live session and serialises every mutation of it."""

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        transition_delay: float = DEFAULT_TRANSITION_DELAY,
        shuffle: Callable[[list[FlashcardItem]], None] = random.shuffle,
    ) -> None:
        self._scheduler = scheduler or AsyncioScheduler()
        self._transition_delay = transition_delay
        self._shuffle = shuffle
        self._session: StudySession | None = None
        self._pending: TimerHandle | None = None

    @property
    def session(self) -> StudySession | None:
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.NOT_STARTED
        return self._session.state

    def start(self, cards: Sequence[FlashcardItem]) -> StudySession:
        """Begin a new pass over ``cards``, replacing any live session."""
        if not cards:
            raise EmptyCardSetError()

        shuffled = list(cards)
        self._shuffle(shuffled)

        self._cancel_pending()
        session = StudySession(
            all_cards=tuple(shuffled),
            remaining_cards=deque(shuffled),
            current_card=shuffled[0],
        )
        self._session = session
        logger.info("Study session %s started with %d cards", session.id, len(shuffled))
        return session

    def reveal(self) -> bool:
        session = self._session
        if session is None or session.state is not SessionState.AWAITING_REVEAL:
            return False
        session.show_answer = True
        return True

    def grade(self, knew_answer: bool) -> bool:
        session = self._session
        if session is None or session.state is not SessionState.ANSWER_SHOWN:
            return False

        session_id, generation = session.id, session.generation + 1
        try:
            pending = self._scheduler.call_later(
                self._transition_delay, lambda: self._advance(session_id, generation)
            )
        except RuntimeError as e:
            logger.warning("Could not schedule transition for session %s: %s", session_id, e)
            pending = None

        card = session.remaining_cards.popleft()
        if knew_answer:
            session.correct_cards.append(card)
            session.correct_count += 1
        else:
            session.remaining_cards.append(card)
        session.total_reviews += 1

        session.is_transitioning = True
        session.generation = generation
        self._pending = pending
        if pending is None:
            self._advance(session_id, generation)
        return True

    def flush(self) -> bool:
        """Finish a pending transition now instead of waiting out the pause."""
        session = self._session
        if session is None or not session.is_transitioning:
            return False
        self._cancel_pending()
        self._advance(session.id, session.generation)
        return True

    def end(self) -> None:
        self._cancel_pending()
        if self._session is not None:
            logger.info(
                "Study session %s ended after %d reviews",
                self._session.id,
                self._session.total_reviews,
            )
        self._session = None

    def _advance(self, session_id: str, generation: int) -> None:
        session = self._session
        if (
            session is None
            or session.id != session_id
            or session.generation != generation
            or not session.is_transitioning
        ):
            logger.debug("Ignoring stale transition for session %s", session_id)
            return

        self._pending = None
        session.current_card = session.remaining_cards[0] if session.remaining_cards else None
        session.show_answer = False
        session.is_transitioning = False
        if session.current_card is None:
            logger.info(
                "Study session %s complete: %d/%d correct",
                session.id,
                session.correct_count,
                session.total_reviews,
            )

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
