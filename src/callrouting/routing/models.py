"""
Domain models for inbound call routing.

RoutingSettings is a per-call snapshot of the tenant configuration,
CallState carries the live signals for one routing request and
RoutingDecision is what the orchestrator acts on.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from callrouting.routing.validation import is_valid_day, parse_business_days
from callrouting.shared.logging import get_logger

logger = get_logger(__name__)


class AgentMode(str, Enum):
    """Operator override of the business-hours clock."""

    AUTO = "auto"
    FORCE_IN_HOURS = "force-in-hours"
    FORCE_OUT_OF_HOURS = "force-out-of-hours"
    VOICEMAIL_ONLY = "voicemail-only"


class FallbackAction(str, Enum):
    """What happens when no human picks up during business hours."""

    ELEVEN_LABS = "eleven-labs"
    VOICEMAIL = "voicemail"
    WHATSAPP = "whatsapp"
    NONE = "none"


class EffectiveMode(str, Enum):
    IN_HOURS = "in-hours"
    OUT_OF_HOURS = "out-of-hours"
    VOICEMAIL_ONLY = "voicemail-only"


class Destination(str, Enum):
    VA_FORWARD = "va-forward"
    ELEVEN_LABS = "eleven-labs"
    BUSY_AGENT = "busy-agent"
    VOICEMAIL = "voicemail"
    HANGUP = "hangup"


class ElevenLabsContext(str, Enum):
    """Script context handed to the conversational agent."""

    IN_HOURS = "in-hours"
    OUT_OF_HOURS = "out-of-hours"
    MISSED_CALL = "missed-call"
    BUSY = "busy"


AI_DESTINATIONS = frozenset({Destination.ELEVEN_LABS, Destination.BUSY_AGENT})

_TRUE_FLAGS = frozenset({"true", "1", "yes", "on"})
_FALSE_FLAGS = frozenset({"false", "0", "no", "off", ""})


def _coerce_enum(enum_cls: type[Enum], value: Any, default: Enum, field_name: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        logger.warning(
            "Unknown %s %r, using %s",
            field_name,
            value,
            default.value,
        )
        return default


class RoutingSettings(BaseModel):
    """Tenant routing configuration, supplied fresh for every call."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    agent_mode: AgentMode = AgentMode.AUTO
    forward_enabled: bool = False
    forward_number: str = ""
    fallback_action: FallbackAction = FallbackAction.NONE

    # "HH:MM", wall-clock time in the business timezone
    business_hours_start: Optional[str] = None
    business_hours_end: Optional[str] = None
    # 1=Monday ... 7=Sunday; None/empty means "use the default week"
    business_days: Optional[frozenset[int]] = None

    eleven_labs_agent_id: str = ""
    eleven_labs_api_key: str = ""
    eleven_labs_busy_agent_id: str = ""

    agent_context_default: Optional[str] = None
    agent_context_out_of_hours: Optional[str] = None
    agent_context_missed: Optional[str] = None

    @field_validator("agent_mode", mode="before")
    @classmethod
    def coerce_agent_mode(cls, v: Any) -> Any:
        return _coerce_enum(AgentMode, v, AgentMode.AUTO, "agent_mode")

    @field_validator("fallback_action", mode="before")
    @classmethod
    def coerce_fallback_action(cls, v: Any) -> Any:
        return _coerce_enum(FallbackAction, v, FallbackAction.NONE, "fallback_action")

    @field_validator("business_days", mode="before")
    @classmethod
    def coerce_business_days(cls, v: Any) -> Any:
        """Accept the stored comma string or any iterable of day numbers."""
        if v is None:
            return None
        if isinstance(v, str):
            return frozenset(parse_business_days(v))
        try:
            items = list(v)
        except TypeError:
            logger.warning("Unreadable business_days %r, using default week", v)
            return None
        days = set()
        for item in items:
            try:
                day = int(item)
            except (TypeError, ValueError):
                continue
            if is_valid_day(day):
                days.add(day)
        return frozenset(days)

    @field_validator("forward_enabled", mode="before")
    @classmethod
    def coerce_forward_enabled(cls, v: Any) -> bool:
        """Read stored flags such as "true", "0" or "" without failing."""
        if v is None or isinstance(v, bool):
            return bool(v)
        if isinstance(v, (int, float)):
            return v != 0
        if isinstance(v, str):
            flag = v.strip().lower()
            if flag in _TRUE_FLAGS:
                return True
            if flag in _FALSE_FLAGS:
                return False
        logger.warning("Unreadable forward_enabled %r, forwarding disabled", v)
        return False

    @field_validator(
        "forward_number",
        "eleven_labs_agent_id",
        "eleven_labs_api_key",
        "eleven_labs_busy_agent_id",
        mode="before",
    )
    @classmethod
    def none_to_blank(cls, v: Any) -> str:
        # Stores hand back numbers for numeric-looking phone numbers and ids
        return "" if v is None else str(v)

    @field_validator(
        "business_hours_start",
        "business_hours_end",
        "agent_context_default",
        "agent_context_out_of_hours",
        "agent_context_missed",
        mode="before",
    )
    @classmethod
    def optional_text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @property
    def has_default_agent(self) -> bool:
        """Default conversational agent is usable."""
        return bool(self.eleven_labs_agent_id.strip() and self.eleven_labs_api_key.strip())

    @property
    def has_busy_agent(self) -> bool:
        return bool(self.eleven_labs_busy_agent_id.strip())

    @property
    def has_forward_target(self) -> bool:
        return self.forward_enabled and bool(self.forward_number.strip())


@dataclass(frozen=True)
class CallState:
    """Live signals for one routing request."""

    is_va_missed_call: bool = False
    active_call_count: int = 0
    # Point in time to evaluate; None means "now"
    instant: Optional[datetime] = None
    # Telephony call id, only used to tag log records
    call_sid: Optional[str] = None

    def __post_init__(self) -> None:
        if self.active_call_count < 0:
            raise ValueError("active_call_count must be >= 0")


class RoutingDecision(BaseModel):
    """What the orchestrator should do with the call."""

    model_config = ConfigDict(frozen=True)

    play_welcome_audio: bool = False
    attempt_va_forward: bool = False
    send_va_sms: bool = False
    destination: Destination
    eleven_labs_context: Optional[ElevenLabsContext] = None
    effective_mode: EffectiveMode
    reason: str = Field(default="", description="Diagnostic only, never used for control flow")

    @model_validator(mode="after")
    def check_context_matches_destination(self) -> "RoutingDecision":
        needs_context = self.destination in AI_DESTINATIONS
        if needs_context != (self.eleven_labs_context is not None):
            raise ValueError(
                f"eleven_labs_context must be set iff destination is an AI agent "
                f"(destination={self.destination.value}, context={self.eleven_labs_context})"
            )
        return self

    @property
    def uses_ai_agent(self) -> bool:
        return self.destination in AI_DESTINATIONS
