"""callrouting: inbound call routing decisions for a small business phone line."""

from callrouting.routing.business_hours import (
    BusinessClock,
    describe_business_clock,
    is_within_business_hours,
)
from callrouting.routing.context_messages import get_context_message, resolve_agent_id
from callrouting.routing.engine import (
    DEFAULT_RULES,
    RoutingRule,
    determine_call_routing,
    route_call,
)
from callrouting.routing.mode import get_effective_mode
from callrouting.routing.models import (
    AgentMode,
    CallState,
    Destination,
    EffectiveMode,
    ElevenLabsContext,
    FallbackAction,
    RoutingDecision,
    RoutingSettings,
)
from callrouting.routing.settings_store import routing_settings_from_store
from callrouting.routing.validation import (
    BusinessHoursValidation,
    format_business_days,
    get_day_names,
    parse_business_days,
    validate_business_hours,
)

__all__ = [
    "AgentMode",
    "BusinessClock",
    "BusinessHoursValidation",
    "CallState",
    "DEFAULT_RULES",
    "Destination",
    "EffectiveMode",
    "ElevenLabsContext",
    "FallbackAction",
    "RoutingDecision",
    "RoutingRule",
    "RoutingSettings",
    "describe_business_clock",
    "determine_call_routing",
    "format_business_days",
    "get_context_message",
    "get_day_names",
    "get_effective_mode",
    "is_within_business_hours",
    "parse_business_days",
    "resolve_agent_id",
    "route_call",
    "routing_settings_from_store",
    "validate_business_hours",
]
