"""Effective operating mode: agent mode override on top of the business clock."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from callrouting.routing.business_hours import is_within_business_hours
from callrouting.routing.models import AgentMode, EffectiveMode, RoutingSettings

_FORCED_MODES = {
    AgentMode.VOICEMAIL_ONLY: EffectiveMode.VOICEMAIL_ONLY,
    AgentMode.FORCE_IN_HOURS: EffectiveMode.IN_HOURS,
    AgentMode.FORCE_OUT_OF_HOURS: EffectiveMode.OUT_OF_HOURS,
}


def get_effective_mode(
    settings: RoutingSettings,
    instant: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> EffectiveMode:
    forced = _FORCED_MODES.get(settings.agent_mode)
    if forced is not None:
        return forced
    if is_within_business_hours(settings, instant, tz):
        return EffectiveMode.IN_HOURS
    return EffectiveMode.OUT_OF_HOURS
