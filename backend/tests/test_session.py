import pytest

from medterm.models.flashcard import SessionState, SourceType
from medterm.study.session import EmptyCardSetError, StudySessionEngine


def no_shuffle(cards):
    pass


@pytest.fixture
def engine(scheduler):
    return StudySessionEngine(scheduler, transition_delay=1.5, shuffle=no_shuffle)


@pytest.fixture
def cards(make_card):
    return [
        make_card("a", front="TermA"),
        make_card("b", front="TermB"),
        make_card("c", front="PhraseC", source_type=SourceType.PHRASE),
    ]


def answer(engine, scheduler, knew):
    assert engine.reveal()
    assert engine.grade(knew)
    scheduler.run_pending()


def test_start_is_a_permutation(scheduler, cards):
    engine = StudySessionEngine(scheduler)
    session = engine.start(cards)

    assert sorted(c.id for c in session.all_cards) == sorted(c.id for c in cards)
    assert list(session.remaining_cards) == list(session.all_cards)
    assert session.current_card == session.remaining_cards[0]
    assert engine.state is SessionState.AWAITING_REVEAL


def test_start_does_not_mutate_input(scheduler, cards):
    original = list(cards)
    StudySessionEngine(scheduler, shuffle=lambda c: c.reverse()).start(cards)
    assert cards == original


def test_start_with_no_cards_fails_and_keeps_current_session(engine, cards):
    session = engine.start(cards)

    with pytest.raises(EmptyCardSetError):
        engine.start([])

    assert engine.session is session


def test_state_before_start(engine):
    assert engine.state is SessionState.NOT_STARTED
    assert engine.session is None
    assert not engine.reveal()
    assert not engine.grade(True)
    assert not engine.flush()


def test_reveal_is_idempotent(engine, cards):
    engine.start(cards)
    assert engine.reveal()
    assert not engine.reveal()
    assert engine.state is SessionState.ANSWER_SHOWN


def test_grade_requires_revealed_answer(engine, cards):
    session = engine.start(cards)
    assert not engine.grade(True)
    assert session.total_reviews == 0


def test_grade_counts_once_and_blocks_until_transition(engine, scheduler, cards):
    session = engine.start(cards)
    engine.reveal()

    assert engine.grade(True)
    assert engine.state is SessionState.TRANSITIONING
    assert not engine.grade(True)
    assert not engine.reveal()
    assert session.correct_count == 1
    assert session.total_reviews == 1

    assert [t.delay for t in scheduler.pending] == [1.5]
    scheduler.run_pending()
    assert engine.state is SessionState.AWAITING_REVEAL
    assert session.correct_count == 1
    assert session.total_reviews == 1


def test_missed_card_goes_to_back_of_queue(engine, scheduler, cards):
    session = engine.start(cards)
    missed = session.current_card
    answer(engine, scheduler, knew=False)

    assert session.remaining_cards[-1] == missed
    assert len(session.remaining_cards) == len(cards)


def test_example_walkthrough(engine, scheduler, cards):
    term_a, term_b, phrase_c = cards
    session = engine.start(cards)

    answer(engine, scheduler, knew=False)
    assert list(session.remaining_cards) == [term_b, phrase_c, term_a]
    assert session.current_card == term_b
    assert session.correct_count == 0
    assert session.total_reviews == 1

    answer(engine, scheduler, knew=True)
    assert session.correct_cards == [term_b]
    assert list(session.remaining_cards) == [phrase_c, term_a]
    assert session.current_card == phrase_c


def test_all_correct_completes_in_one_pass(engine, scheduler, cards):
    session = engine.start(cards)
    for _ in cards:
        answer(engine, scheduler, knew=True)

    assert engine.state is SessionState.COMPLETE
    assert session.total_reviews == len(cards)
    assert session.correct_count == len(cards)
    assert not engine.reveal()


def test_one_miss_completes_with_failed_card_last(engine, scheduler, cards):
    session = engine.start(cards)
    graded = [session.current_card]
    answer(engine, scheduler, knew=False)
    while not session.is_complete:
        graded.append(session.current_card)
        answer(engine, scheduler, knew=True)

    assert session.total_reviews == len(cards) + 1
    assert graded[-1] == graded[0]
    assert session.correct_count <= session.total_reviews


def test_end_cancels_pending_transition(engine, scheduler, cards):
    engine.start(cards)
    engine.reveal()
    engine.grade(True)
    timer = scheduler.timers[-1]

    engine.end()
    assert timer.cancelled
    assert engine.state is SessionState.NOT_STARTED


def test_stale_timer_does_not_touch_new_session(engine, scheduler, cards):
    engine.start(cards)
    engine.reveal()
    engine.grade(False)
    stale = scheduler.timers[-1]

    session = engine.start(cards)
    engine.reveal()
    stale.callback()

    assert engine.session is session
    assert engine.state is SessionState.ANSWER_SHOWN
    assert session.current_card == cards[0]


def test_flush_runs_transition_immediately(engine, scheduler, cards):
    session = engine.start(cards)
    engine.reveal()
    engine.grade(True)

    assert engine.flush()
    assert session.current_card == cards[1]
    assert scheduler.pending == []
    assert not engine.flush()
