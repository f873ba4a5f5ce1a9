"""Unit tests for the conversation state machine."""

import pytest

from app.domain.entities.conversation import ConversationState
from app.domain.services.conversation_state_machine import (
    TRANSITIONS,
    ConversationEvent,
    ConversationStateMachine,
)


@pytest.fixture
def machine():
    """Create state machine."""
    return ConversationStateMachine()


@pytest.mark.parametrize(
    "state, event, expected",
    [
        (
            ConversationState.INITIAL_GREETING,
            ConversationEvent.PHARMACY_FOUND,
            ConversationState.PHARMACY_IDENTIFIED,
        ),
        (
            ConversationState.INITIAL_GREETING,
            ConversationEvent.PHARMACY_NOT_FOUND,
            ConversationState.COLLECTING_LEAD_INFO,
        ),
        (
            ConversationState.PHARMACY_IDENTIFIED,
            ConversationEvent.DISCUSSING,
            ConversationState.DISCUSSING_SERVICES,
        ),
        (
            ConversationState.COLLECTING_LEAD_INFO,
            ConversationEvent.INFO_COLLECTED,
            ConversationState.DISCUSSING_SERVICES,
        ),
        (
            ConversationState.DISCUSSING_SERVICES,
            ConversationEvent.FOLLOWUP_REQUESTED,
            ConversationState.SCHEDULING_FOLLOWUP,
        ),
        (
            ConversationState.SCHEDULING_FOLLOWUP,
            ConversationEvent.DISCUSSING,
            ConversationState.DISCUSSING_SERVICES,
        ),
        (
            ConversationState.SCHEDULING_FOLLOWUP,
            ConversationEvent.CONVERSATION_ENDED,
            ConversationState.COMPLETED,
        ),
    ],
)
def test_listed_transitions(machine, state, event, expected):
    """Test that table entries move to the listed state."""
    assert machine.transition(state, event) == expected
    assert machine.can_transition(state, event)


def test_transition_table_has_eleven_entries():
    """Test that the transition table is complete and nothing else was added."""
    assert len(TRANSITIONS) == 11


def test_unlisted_pair_is_a_no_op(machine):
    """Test that an event with no transition leaves the state unchanged."""
    state = ConversationState.COLLECTING_LEAD_INFO
    assert machine.transition(state, ConversationEvent.CONVERSATION_ENDED) == state
    assert not machine.can_transition(state, ConversationEvent.CONVERSATION_ENDED)


def test_every_unlisted_pair_is_a_no_op(machine):
    """Test the no-op policy across the whole state x event space."""
    for state in ConversationState:
        for event in ConversationEvent:
            if (state, event) not in TRANSITIONS:
                assert machine.transition(state, event) == state


def test_completed_is_terminal(machine):
    """Test that COMPLETED has no outgoing transitions."""
    assert machine.available_events(ConversationState.COMPLETED) == frozenset()
    for event in ConversationEvent:
        assert machine.transition(ConversationState.COMPLETED, event) == ConversationState.COMPLETED


def test_available_events(machine):
    """Test available events for PHARMACY_IDENTIFIED."""
    assert machine.available_events(ConversationState.PHARMACY_IDENTIFIED) == {
        ConversationEvent.DISCUSSING,
        ConversationEvent.FOLLOWUP_REQUESTED,
        ConversationEvent.CONVERSATION_ENDED,
    }


def test_transition_is_deterministic(machine):
    """Test that the same input always yields the same output."""
    results = {
        machine.transition(ConversationState.PHARMACY_IDENTIFIED, ConversationEvent.DISCUSSING)
        for _ in range(5)
    }
    assert results == {ConversationState.DISCUSSING_SERVICES}
