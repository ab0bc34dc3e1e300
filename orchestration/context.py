"""
Event context.

Immutable context object passed between state handlers.
"""

from dataclasses import dataclass, replace
from typing import Optional

from domain.jets import BackgroundEstimate, Jet, PseudoParticle
from domain.tracks import Collision
from services.jets.selection import JetDecision
from .states import EventState


@dataclass(frozen=True)
class EventContext:
    """
    Immutable context for one event in one execution mode.

    Each state handler returns a new context with updated fields.
    """

    collision: Collision
    mode: str
    current_state: EventState

    # Data accumulated while the event moves through the states
    particles: tuple[PseudoParticle, ...] = ()
    jets: tuple[Jet, ...] = ()
    background: Optional[BackgroundEstimate] = None
    decisions: tuple[JetDecision, ...] = ()

    # Terminal information
    skip_reason: Optional[str] = None
    error_message: Optional[str] = None

    def with_state(self, new_state: EventState) -> 'EventContext':
        return replace(self, current_state=new_state)

    def with_particles(self, particles) -> 'EventContext':
        return replace(self, particles=tuple(particles))

    def with_jets(self, jets, background: BackgroundEstimate) -> 'EventContext':
        return replace(self, jets=tuple(jets), background=background)

    def with_decisions(self, decisions) -> 'EventContext':
        return replace(self, decisions=tuple(decisions))

    def with_skip(self, reason: str) -> 'EventContext':
        """
        Return new context routed to SKIPPED.

        Args:
            reason: Short identifier of the failed gate

        Returns:
            New EventContext in the SKIPPED state
        """
        return replace(self, current_state=EventState.SKIPPED, skip_reason=reason)

    def with_error(self, message: str) -> 'EventContext':
        return replace(self, current_state=EventState.FAILED, error_message=message)

    @property
    def is_terminal(self) -> bool:
        return self.current_state.is_terminal()

    @property
    def n_selected_jets(self) -> int:
        return sum(1 for d in self.decisions if d.selected)

    @property
    def outcome(self) -> str:
        """Statistics key: 'completed', 'failed' or 'skipped:<reason>'."""
        if self.current_state == EventState.SKIPPED:
            return f"skipped:{self.skip_reason}"
        if self.current_state == EventState.COMPLETED:
            return "completed"
        return "failed"
