from medterm.models.flashcard import SessionState
from medterm.study.progress import COMPLETE_LABEL, progress_percent, round_label, snapshot
from medterm.study.session import StudySessionEngine


def test_progress_tracks_graduated_cards(scheduler, make_card):
    cards = [make_card(str(i)) for i in range(4)]
    engine = StudySessionEngine(scheduler, shuffle=lambda c: None)
    session = engine.start(cards)

    assert progress_percent(session) == 0
    assert round_label(session) == "Round 1 of 4"

    engine.reveal()
    engine.grade(False)
    scheduler.run_pending()
    assert progress_percent(session) == 0
    assert round_label(session) == "Round 1 of 4"

    engine.reveal()
    engine.grade(True)
    scheduler.run_pending()
    assert progress_percent(session) == 25
    assert round_label(session) == "Round 2 of 4"


def test_snapshot_hides_answer_until_revealed(scheduler, make_card):
    engine = StudySessionEngine(scheduler, shuffle=lambda c: None)
    session = engine.start([make_card("1", back="High blood pressure")])

    view = snapshot(session)
    assert view.state is SessionState.AWAITING_REVEAL
    assert view.current_card.back is None

    engine.reveal()
    assert snapshot(session).current_card.back == "High blood pressure"

    engine.grade(True)
    scheduler.run_pending()
    done = snapshot(session)
    assert done.state is SessionState.COMPLETE
    assert done.current_card is None
    assert done.progress_percent == 100
    assert done.round_label == COMPLETE_LABEL
