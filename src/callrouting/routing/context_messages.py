"""
Script lines and agent selection for calls handed to a conversational agent.
"""

from __future__ import annotations

from typing import Optional

from callrouting.routing.models import Destination, ElevenLabsContext, RoutingDecision, RoutingSettings

DEFAULT_CONTEXT_MESSAGES: dict[ElevenLabsContext, str] = {
    ElevenLabsContext.IN_HOURS: (
        "A team member will be with you shortly. "
        "I can help answer questions about our services while you wait."
    ),
    ElevenLabsContext.OUT_OF_HOURS: (
        "We are currently closed. Our hours are 8am-6pm Monday to Friday. "
        "Please leave a message and we will call you back first thing."
    ),
    ElevenLabsContext.MISSED_CALL: (
        "Sorry for the wait! Our team couldn't get to the phone. "
        "I'm here to help though - what can I do for you?"
    ),
}


def get_context_message(context: Optional[ElevenLabsContext], settings: RoutingSettings) -> str:
    """Tenant message for ``context``, or the built-in default.

    The busy agent carries its own script, so ``busy`` (like ``None``)
    yields an empty string.
    """
    if context == ElevenLabsContext.IN_HOURS:
        custom = settings.agent_context_default
    elif context == ElevenLabsContext.OUT_OF_HOURS:
        custom = settings.agent_context_out_of_hours
    elif context == ElevenLabsContext.MISSED_CALL:
        custom = settings.agent_context_missed
    else:
        return ""
    return custom or DEFAULT_CONTEXT_MESSAGES[ElevenLabsContext(context)]


def resolve_agent_id(decision: RoutingDecision, settings: RoutingSettings) -> Optional[str]:
    """Agent id the orchestrator should connect for ``decision``, if any."""
    if decision.destination == Destination.BUSY_AGENT:
        return settings.eleven_labs_busy_agent_id or None
    if decision.destination == Destination.ELEVEN_LABS:
        return settings.eleven_labs_agent_id or None
    return None
