from natureup.models.base_model import ConversationPhase

VALID_TRANSITIONS = {
    ConversationPhase.INITIAL_CHAT: {ConversationPhase.EXCURSION_PLANNING},
    ConversationPhase.EXCURSION_PLANNING: {ConversationPhase.EXCURSION_CREATION, ConversationPhase.INITIAL_CHAT},
    ConversationPhase.EXCURSION_CREATION: {ConversationPhase.EXCURSION_GUIDING, ConversationPhase.INITIAL_CHAT},
    ConversationPhase.EXCURSION_GUIDING: {ConversationPhase.POST_EXCURSION_FOLLOWUP},
    ConversationPhase.POST_EXCURSION_FOLLOWUP: {ConversationPhase.INITIAL_CHAT, ConversationPhase.EXCURSION_PLANNING},
}

EXCURSION_PHASES = {
    ConversationPhase.EXCURSION_PLANNING,
    ConversationPhase.EXCURSION_CREATION,
    ConversationPhase.EXCURSION_GUIDING,
}


def can_transition(from_phase: str, to_phase: str) -> bool:
    try:
        source = ConversationPhase(from_phase)
        target = ConversationPhase(to_phase)
    except ValueError:
        return False
    return target in VALID_TRANSITIONS[source]


def assistant_for_phase(phase: str | None) -> str:
    """Which assistant answers in a phase: "excursion_creator" or "health_coach"."""
    try:
        current = ConversationPhase(phase)
    except ValueError:
        return "health_coach"
    return "excursion_creator" if current in EXCURSION_PHASES else "health_coach"
