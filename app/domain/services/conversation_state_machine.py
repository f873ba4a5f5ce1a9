"""Conversation state machine.

A static transition table keyed by ``(state, event)``. Pairs that are not in
the table leave the state unchanged; ``COMPLETED`` has no outgoing
transitions.
"""

from enum import Enum

from app.domain.entities.conversation import ConversationState


class ConversationEvent(str, Enum):
    """Events that move a conversation between stages."""

    PHARMACY_FOUND = "PHARMACY_FOUND"
    PHARMACY_NOT_FOUND = "PHARMACY_NOT_FOUND"
    INFO_COLLECTED = "INFO_COLLECTED"
    DISCUSSING = "DISCUSSING"
    FOLLOWUP_REQUESTED = "FOLLOWUP_REQUESTED"
    CONVERSATION_ENDED = "CONVERSATION_ENDED"


TRANSITIONS: dict[tuple[ConversationState, ConversationEvent], ConversationState] = {
    # Initial greeting
    (
        ConversationState.INITIAL_GREETING,
        ConversationEvent.PHARMACY_FOUND,
    ): ConversationState.PHARMACY_IDENTIFIED,
    (
        ConversationState.INITIAL_GREETING,
        ConversationEvent.PHARMACY_NOT_FOUND,
    ): ConversationState.COLLECTING_LEAD_INFO,
    # Pharmacy identified
    (
        ConversationState.PHARMACY_IDENTIFIED,
        ConversationEvent.DISCUSSING,
    ): ConversationState.DISCUSSING_SERVICES,
    (
        ConversationState.PHARMACY_IDENTIFIED,
        ConversationEvent.FOLLOWUP_REQUESTED,
    ): ConversationState.SCHEDULING_FOLLOWUP,
    (
        ConversationState.PHARMACY_IDENTIFIED,
        ConversationEvent.CONVERSATION_ENDED,
    ): ConversationState.COMPLETED,
    # Collecting lead info
    (
        ConversationState.COLLECTING_LEAD_INFO,
        ConversationEvent.INFO_COLLECTED,
    ): ConversationState.DISCUSSING_SERVICES,
    (
        ConversationState.COLLECTING_LEAD_INFO,
        ConversationEvent.FOLLOWUP_REQUESTED,
    ): ConversationState.SCHEDULING_FOLLOWUP,
    # Discussing services
    (
        ConversationState.DISCUSSING_SERVICES,
        ConversationEvent.FOLLOWUP_REQUESTED,
    ): ConversationState.SCHEDULING_FOLLOWUP,
    (
        ConversationState.DISCUSSING_SERVICES,
        ConversationEvent.CONVERSATION_ENDED,
    ): ConversationState.COMPLETED,
    # Scheduling followup
    (
        ConversationState.SCHEDULING_FOLLOWUP,
        ConversationEvent.CONVERSATION_ENDED,
    ): ConversationState.COMPLETED,
    (
        ConversationState.SCHEDULING_FOLLOWUP,
        ConversationEvent.DISCUSSING,
    ): ConversationState.DISCUSSING_SERVICES,
}


class ConversationStateMachine:
    """Pure, deterministic transition function over the conversation stages."""

    def transition(
        self, current_state: ConversationState, event: ConversationEvent
    ) -> ConversationState:
        """
        Compute the next state for an event.

        Args:
            current_state: Current conversation state
            event: Event to apply

        Returns:
            Next state, or current_state when the pair has no transition
        """
        return TRANSITIONS.get((current_state, event), current_state)

    def can_transition(self, current_state: ConversationState, event: ConversationEvent) -> bool:
        """Check whether an event has a transition from current_state."""
        return (current_state, event) in TRANSITIONS

    def available_events(self, current_state: ConversationState) -> frozenset[ConversationEvent]:
        """
        List the events accepted in a state.

        Args:
            current_state: Conversation state

        Returns:
            Events with a transition out of current_state (empty for COMPLETED)
        """
        return frozenset(event for (state, event) in TRANSITIONS if state == current_state)
