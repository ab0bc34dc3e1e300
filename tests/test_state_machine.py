"""
Tests for the per-event state machine and its handlers.
"""

from unittest.mock import Mock

import pytest

from domain.tracks import Collision
from orchestration import EventContext, EventState, EventStateMachine
from orchestration.handlers import (
    EventRejectionHandler,
    EventSelectionHandler,
    JetInputHandler,
    TrackAnalysisHandler,
)
from orchestration.states import is_valid_transition


def _context(collision=None, state=EventState.EVENT_SELECTION):
    collision = collision or Collision(sel8=True, pos_z=0.0)
    return EventContext(collision=collision, mode="data", current_state=state)


def _handler(next_state):
    handler = Mock()
    handler.handle.side_effect = lambda ctx: (ctx, next_state)
    return handler


class TestStateTransitions:
    """Tests for the transition table."""

    def test_jet_path(self):
        """Test the transitions of the jet path."""
        assert is_valid_transition(EventState.EVENT_SELECTION, EventState.EVENT_REJECTION)
        assert is_valid_transition(EventState.EVENT_REJECTION, EventState.JET_INPUT)
        assert is_valid_transition(EventState.EVENT_SELECTION, EventState.JET_INPUT)
        assert is_valid_transition(EventState.JET_INPUT, EventState.CLUSTERING)
        assert is_valid_transition(EventState.CLUSTERING, EventState.JET_ANALYSIS)
        assert is_valid_transition(EventState.JET_ANALYSIS, EventState.COMPLETED)

    def test_invalid_transitions(self):
        """Test skipped gates and moves out of terminal states."""
        assert not is_valid_transition(EventState.EVENT_SELECTION, EventState.COMPLETED)
        assert not is_valid_transition(EventState.EVENT_REJECTION, EventState.EVENT_SELECTION)
        assert not is_valid_transition(EventState.CLUSTERING, EventState.SKIPPED)
        assert not is_valid_transition(EventState.COMPLETED, EventState.EVENT_SELECTION)

    def test_terminal_states(self):
        """Test is_terminal."""
        assert EventState.SKIPPED.is_terminal()
        assert not EventState.TRACK_ANALYSIS.is_terminal()


class TestEventContext:
    """Tests for EventContext outcomes."""

    def test_outcomes(self):
        """Test the statistics keys."""
        context = _context()
        assert context.with_skip("vertex_z").outcome == "skipped:vertex_z"
        assert context.with_state(EventState.COMPLETED).outcome == "completed"
        assert context.with_error("boom").outcome == "failed"
        assert context.outcome == "failed"


class TestEventRejectionHandler:
    """Tests for EventRejectionHandler."""

    @pytest.mark.parametrize("draw, rejected", [(0, True), (2, True), (3, False), (99, False)])
    def test_rejection_threshold(self, draw, rejected):
        """Test that draws below the percentage reject the event."""
        rng = Mock()
        rng.integers.return_value = draw
        analyzer = Mock(uses_jets=True)

        handler = EventRejectionHandler(analyzer, rng, percentage=3)
        context, next_state = handler.handle(_context(state=EventState.EVENT_REJECTION))

        analyzer.count_rejection.assert_called_once_with(rejected)
        if rejected:
            assert next_state == EventState.SKIPPED
            assert context.skip_reason == "rejected"
            analyzer.on_event_selected.assert_not_called()
        else:
            assert next_state == EventState.JET_INPUT
            analyzer.on_event_selected.assert_called_once_with(context.collision)

    def test_survivor_of_inclusive_mode(self):
        """Test that a kept event of a jet-free mode goes to track analysis."""
        rng = Mock()
        rng.integers.return_value = 50

        _, next_state = EventRejectionHandler(Mock(uses_jets=False), rng, percentage=3).handle(
            _context(state=EventState.EVENT_REJECTION)
        )

        assert next_state == EventState.TRACK_ANALYSIS

    def test_zero_percentage_never_rejects(self):
        """Test that percentage 0 keeps every event."""
        rng = Mock()
        rng.integers.return_value = 0
        assert not EventRejectionHandler(Mock(), rng, percentage=0).should_reject()


class TestEventSelectionHandler:
    """Tests for EventSelectionHandler."""

    def test_trigger_flag(self):
        """Test that events without sel8 are skipped."""
        analyzer = Mock(uses_jets=True)
        context, next_state = EventSelectionHandler(analyzer, 10.0).handle(
            _context(Collision(sel8=False, pos_z=0.0))
        )

        assert next_state == EventState.SKIPPED
        assert context.skip_reason == "sel8"
        analyzer.on_event_selected.assert_not_called()

    def test_vertex_window(self):
        """Test that |z| above the window is skipped and the boundary is kept."""
        handler = EventSelectionHandler(Mock(uses_jets=True), 10.0)

        context, next_state = handler.handle(_context(Collision(sel8=True, pos_z=-10.5)))
        assert context.skip_reason == "vertex_z"

        _, next_state = handler.handle(_context(Collision(sel8=True, pos_z=10.0)))
        assert next_state == EventState.JET_INPUT

    def test_inclusive_modes_go_to_track_analysis(self):
        """Test the jet-free path."""
        analyzer = Mock(uses_jets=False)
        _, next_state = EventSelectionHandler(analyzer, 10.0).handle(_context())

        assert next_state == EventState.TRACK_ANALYSIS
        analyzer.on_event_selected.assert_called_once()

    def test_hand_over_to_rejection(self):
        """Test that with rejection enabled a passing event is not yet counted."""
        analyzer = Mock(uses_jets=True)
        _, next_state = EventSelectionHandler(analyzer, 10.0, rejection_enabled=True).handle(_context())

        assert next_state == EventState.EVENT_REJECTION
        analyzer.on_event_selected.assert_not_called()


class TestJetInputHandler:
    """Tests for JetInputHandler."""

    def test_empty_input_is_skipped(self):
        """Test that an event without clustering input stops early."""
        analyzer = Mock()
        analyzer.build_jet_input.return_value = []

        context, next_state = JetInputHandler(analyzer).handle(_context(state=EventState.JET_INPUT))

        assert next_state == EventState.SKIPPED
        assert context.skip_reason == "empty_event"
        analyzer.on_jet_input_ready.assert_not_called()


class TestEventStateMachine:
    """Tests for EventStateMachine."""

    def test_missing_initial_handler(self):
        """Test that the initial state needs a handler."""
        with pytest.raises(ValueError, match="initial state"):
            EventStateMachine("data", {})

    def test_inclusive_path(self):
        """Test selection followed by track analysis."""
        analyzer = Mock(uses_jets=False)
        machine = EventStateMachine("efficiency", {
            EventState.EVENT_SELECTION: EventSelectionHandler(analyzer, 10.0),
            EventState.TRACK_ANALYSIS: TrackAnalysisHandler(analyzer),
        })

        context = machine.run(Collision(sel8=True, pos_z=1.0))

        assert context.current_state == EventState.COMPLETED
        analyzer.analyze_tracks.assert_called_once()

    def test_rejection_runs_after_selection(self):
        """Test that an event failing the vertex window never reaches the rejection draw."""
        analyzer = Mock(uses_jets=False)
        rng = Mock()
        machine = EventStateMachine("data", {
            EventState.EVENT_SELECTION: EventSelectionHandler(analyzer, 10.0, rejection_enabled=True),
            EventState.EVENT_REJECTION: EventRejectionHandler(analyzer, rng, percentage=0),
            EventState.TRACK_ANALYSIS: TrackAnalysisHandler(analyzer),
        })

        context = machine.run(Collision(sel8=True, pos_z=15.0))

        assert context.skip_reason == "vertex_z"
        rng.integers.assert_not_called()
        analyzer.count_rejection.assert_not_called()

        rng.integers.return_value = 50
        context = machine.run(Collision(sel8=True, pos_z=1.0))

        assert context.current_state == EventState.COMPLETED
        analyzer.count_rejection.assert_called_once_with(False)
        analyzer.on_event_selected.assert_called_once()

    def test_handler_exception_fails_event(self):
        """Test that an exception is turned into the FAILED state."""
        handler = Mock()
        handler.handle.side_effect = RuntimeError("boom")

        context = EventStateMachine("data", {EventState.EVENT_SELECTION: handler}).run(
            Collision(sel8=True, pos_z=0.0)
        )

        assert context.current_state == EventState.FAILED
        assert "boom" in context.error_message

    def test_invalid_transition_fails_event(self):
        """Test that a handler naming an unreachable state fails the event."""
        machine = EventStateMachine("data", {EventState.EVENT_SELECTION: _handler(EventState.COMPLETED)})

        context = machine.run(Collision(sel8=True, pos_z=0.0))

        assert context.current_state == EventState.FAILED
        assert "Invalid state transition" in context.error_message

    def test_missing_handler_fails_event(self):
        """Test that a state without handler fails the event."""
        machine = EventStateMachine("data", {EventState.EVENT_SELECTION: _handler(EventState.JET_INPUT)})

        context = machine.run(Collision(sel8=True, pos_z=0.0))

        assert context.current_state == EventState.FAILED
        assert "No handler" in context.error_message
