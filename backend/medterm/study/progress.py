from __future__ import annotations

from medterm.models.flashcard import CardView, FlashcardItem, SessionSnapshot
from medterm.study.session import StudySession

COMPLETE_LABEL = "Complete"


def progress_percent(session: StudySession) -> float:
    total = len(session.all_cards)
    if total == 0:
        return 0.0
    return 100 * (total - len(session.remaining_cards)) / total


def round_label(session: StudySession) -> str:
    """Return "Round N of M"; N tracks queue shrinkage, not per-card repeats."""
    if not session.remaining_cards:
        return COMPLETE_LABEL
    total = len(session.all_cards)
    return f"Round {total - len(session.remaining_cards) + 1} of {total}"


def _card_view(card: FlashcardItem, show_answer: bool) -> CardView:
    return CardView(
        id=card.id,
        source_type=card.source_type,
        front=card.front,
        back=card.back if show_answer else None,
        pronunciation=card.pronunciation,
        categories=list(card.categories),
    )


def snapshot(session: StudySession) -> SessionSnapshot:
    current = session.current_card
    return SessionSnapshot(
        id=session.id,
        state=session.state,
        current_card=_card_view(current, session.show_answer) if current else None,
        show_answer=session.show_answer,
        is_transitioning=session.is_transitioning,
        total_cards=len(session.all_cards),
        remaining_count=len(session.remaining_cards),
        correct_cards=len(session.correct_cards),
        correct_count=session.correct_count,
        total_reviews=session.total_reviews,
        progress_percent=round(progress_percent(session), 1),
        round_label=round_label(session),
    )
