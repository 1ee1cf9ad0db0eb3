"""
Mapping from the key/value settings store to RoutingSettings.

The store itself lives outside this package; callers read a snapshot of the
``twilio.*`` keys and hand it over as a plain mapping. Missing keys take the
store defaults, and the agent credentials fall back to the environment.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from callrouting.config import Settings, get_settings
from callrouting.routing.context_messages import DEFAULT_CONTEXT_MESSAGES
from callrouting.routing.models import ElevenLabsContext, RoutingSettings

# Store key -> RoutingSettings field
STORE_KEYS: dict[str, str] = {
    "twilio.agent_mode": "agent_mode",
    "twilio.forward_enabled": "forward_enabled",
    "twilio.forward_number": "forward_number",
    "twilio.fallback_action": "fallback_action",
    "twilio.business_hours_start": "business_hours_start",
    "twilio.business_hours_end": "business_hours_end",
    "twilio.business_days": "business_days",
    "twilio.eleven_labs_agent_id": "eleven_labs_agent_id",
    "twilio.eleven_labs_api_key": "eleven_labs_api_key",
    "twilio.eleven_labs_busy_agent_id": "eleven_labs_busy_agent_id",
    "twilio.agent_context_default": "agent_context_default",
    "twilio.agent_context_out_of_hours": "agent_context_out_of_hours",
    "twilio.agent_context_missed": "agent_context_missed",
}

DEFAULT_STORE_VALUES: dict[str, Any] = {
    "twilio.agent_mode": "auto",
    "twilio.forward_enabled": False,
    "twilio.forward_number": "",
    "twilio.fallback_action": "whatsapp",
    "twilio.business_hours_start": "08:00",
    "twilio.business_hours_end": "18:00",
    "twilio.business_days": "1,2,3,4,5",
    "twilio.eleven_labs_agent_id": "",
    "twilio.eleven_labs_api_key": "",
    "twilio.eleven_labs_busy_agent_id": "",
    "twilio.agent_context_default": DEFAULT_CONTEXT_MESSAGES[ElevenLabsContext.IN_HOURS],
    "twilio.agent_context_out_of_hours": DEFAULT_CONTEXT_MESSAGES[ElevenLabsContext.OUT_OF_HOURS],
    "twilio.agent_context_missed": DEFAULT_CONTEXT_MESSAGES[ElevenLabsContext.MISSED_CALL],
}

# Fields that fall back to the environment when the store value is blank
_ENV_FALLBACKS: dict[str, str] = {
    "eleven_labs_agent_id": "eleven_labs_agent_id",
    "eleven_labs_api_key": "eleven_labs_api_key",
}


def _store_value(values: Mapping[str, Any], key: str) -> Any:
    value = values.get(key)
    return DEFAULT_STORE_VALUES[key] if value is None else value


def routing_settings_from_store(
    values: Mapping[str, Any],
    *,
    config: Optional[Settings] = None,
) -> RoutingSettings:
    """Build RoutingSettings from a settings-store snapshot.

    Args:
        values: Store rows as ``{key: value}``; unrelated keys are ignored.
        config: Application settings for credential fallbacks.

    Returns:
        Immutable RoutingSettings.
    """
    config = config or get_settings()
    fields: dict[str, Any] = {
        field_name: _store_value(values, key) for key, field_name in STORE_KEYS.items()
    }
    for field_name, config_attr in _ENV_FALLBACKS.items():
        if not str(fields.get(field_name) or "").strip():
            fields[field_name] = getattr(config, config_attr)
    return RoutingSettings(**fields)
