"""
Inbound call routing decision table.

Rules are evaluated top to bottom and the first rule whose predicate matches
produces the decision. The table is plain data so it can be inspected,
tested rule by rule, or extended by inserting a rule at the right position.

The engine is pure: it performs no I/O besides logging the decision, keeps
no state, and samples the clock at most once per call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional, Sequence, Tuple

from callrouting.routing.business_hours import resolve_business_timezone
from callrouting.routing.mode import get_effective_mode
from callrouting.routing.models import (
    CallState,
    Destination,
    EffectiveMode,
    ElevenLabsContext,
    FallbackAction,
    RoutingDecision,
    RoutingSettings,
)
from callrouting.shared.logging import bound_call, get_logger, log_with_context

logger = get_logger(__name__)


@dataclass(frozen=True)
class RoutingContext:
    """Everything a rule may look at."""

    settings: RoutingSettings
    call_state: CallState
    effective_mode: EffectiveMode
    instant: datetime

    @property
    def in_hours(self) -> bool:
        return self.effective_mode == EffectiveMode.IN_HOURS

    def decision(
        self,
        destination: Destination,
        reason: str,
        *,
        context: Optional[ElevenLabsContext] = None,
        play_welcome_audio: bool = False,
        attempt_va_forward: bool = False,
        send_va_sms: bool = False,
    ) -> RoutingDecision:
        return RoutingDecision(
            play_welcome_audio=play_welcome_audio,
            attempt_va_forward=attempt_va_forward,
            send_va_sms=send_va_sms,
            destination=destination,
            eleven_labs_context=context,
            effective_mode=self.effective_mode,
            reason=reason,
        )


@dataclass(frozen=True)
class RoutingRule:
    name: str
    applies: Callable[[RoutingContext], bool]
    decide: Callable[[RoutingContext], RoutingDecision]


# --- predicates ---------------------------------------------------------------

def _line_busy(ctx: RoutingContext) -> bool:
    return (
        ctx.in_hours
        and not ctx.call_state.is_va_missed_call
        and ctx.call_state.active_call_count > 0
        and ctx.settings.has_busy_agent
    )


def _voicemail_only(ctx: RoutingContext) -> bool:
    return ctx.effective_mode == EffectiveMode.VOICEMAIL_ONLY


def _out_of_hours(ctx: RoutingContext) -> bool:
    return ctx.effective_mode == EffectiveMode.OUT_OF_HOURS


def _missed_with_busy_agent(ctx: RoutingContext) -> bool:
    return ctx.in_hours and ctx.call_state.is_va_missed_call and ctx.settings.has_busy_agent


def _missed_to_ai_agent(ctx: RoutingContext) -> bool:
    return (
        ctx.in_hours
        and ctx.call_state.is_va_missed_call
        and ctx.settings.fallback_action == FallbackAction.ELEVEN_LABS
        and ctx.settings.has_default_agent
    )


def _missed_to_voicemail(ctx: RoutingContext) -> bool:
    return (
        ctx.in_hours
        and ctx.call_state.is_va_missed_call
        and ctx.settings.fallback_action == FallbackAction.VOICEMAIL
    )


def _missed_call(ctx: RoutingContext) -> bool:
    return ctx.in_hours and ctx.call_state.is_va_missed_call


def _forward_to_va(ctx: RoutingContext) -> bool:
    return ctx.in_hours and ctx.settings.has_forward_target


def _direct_to_ai_agent(ctx: RoutingContext) -> bool:
    return (
        ctx.in_hours
        and ctx.settings.fallback_action == FallbackAction.ELEVEN_LABS
        and ctx.settings.has_default_agent
    )


def _always(ctx: RoutingContext) -> bool:
    return True


# --- decision builders --------------------------------------------------------

def _busy_agent(ctx: RoutingContext) -> RoutingDecision:
    return ctx.decision(
        Destination.BUSY_AGENT,
        f"Line busy ({ctx.call_state.active_call_count} active): routing to busy agent",
        context=ElevenLabsContext.BUSY,
        play_welcome_audio=True,
    )


def _voicemail_only_decision(ctx: RoutingContext) -> RoutingDecision:
    return ctx.decision(
        Destination.VOICEMAIL,
        "Mode set to voicemail-only, bypassing all other logic",
    )


def _out_of_hours_decision(ctx: RoutingContext) -> RoutingDecision:
    if ctx.settings.has_default_agent:
        return ctx.decision(
            Destination.ELEVEN_LABS,
            "Out-of-hours: straight to Eleven Labs with out-of-hours context",
            context=ElevenLabsContext.OUT_OF_HOURS,
        )
    return ctx.decision(
        Destination.VOICEMAIL,
        "Out-of-hours: no Eleven Labs agent configured, falling back to voicemail",
    )


def _missed_busy_agent(ctx: RoutingContext) -> RoutingDecision:
    # Takes precedence over fallback_action, including "voicemail"
    return ctx.decision(
        Destination.BUSY_AGENT,
        "VA missed call: busy agent configured, routing to busy agent",
        context=ElevenLabsContext.BUSY,
    )


def _missed_ai_agent(ctx: RoutingContext) -> RoutingDecision:
    return ctx.decision(
        Destination.ELEVEN_LABS,
        "VA missed call: redirecting to Eleven Labs with missed-call context",
        context=ElevenLabsContext.MISSED_CALL,
    )


def _missed_voicemail(ctx: RoutingContext) -> RoutingDecision:
    return ctx.decision(
        Destination.VOICEMAIL,
        "VA missed call: fallback set to voicemail",
    )


def _missed_hangup(ctx: RoutingContext) -> RoutingDecision:
    # whatsapp/none: the orchestrator has already sent the follow-up message
    return ctx.decision(
        Destination.HANGUP,
        f"VA missed call: fallback is {ctx.settings.fallback_action.value}, ending call",
    )


def _va_forward(ctx: RoutingContext) -> RoutingDecision:
    return ctx.decision(
        Destination.VA_FORWARD,
        "In-hours with forward enabled: play welcome, attempt VA",
        play_welcome_audio=True,
        attempt_va_forward=True,
        send_va_sms=True,
    )


def _direct_ai_agent(ctx: RoutingContext) -> RoutingDecision:
    return ctx.decision(
        Destination.ELEVEN_LABS,
        "In-hours, no forward: going to Eleven Labs with in-hours context",
        context=ElevenLabsContext.IN_HOURS,
        play_welcome_audio=True,
    )


def _direct_voicemail(ctx: RoutingContext) -> RoutingDecision:
    return ctx.decision(
        Destination.VOICEMAIL,
        "In-hours, no forward, no Eleven Labs: going to voicemail",
        play_welcome_audio=True,
    )


DEFAULT_RULES: Tuple[RoutingRule, ...] = (
    RoutingRule("busy-check", _line_busy, _busy_agent),
    RoutingRule("voicemail-only", _voicemail_only, _voicemail_only_decision),
    RoutingRule("out-of-hours", _out_of_hours, _out_of_hours_decision),
    # In-hours rules. Apart from the final catch-all each predicate checks
    # ctx.in_hours itself, so reordering cannot route a closed line here.
    RoutingRule("missed-call-busy-agent", _missed_with_busy_agent, _missed_busy_agent),
    RoutingRule("missed-call-eleven-labs", _missed_to_ai_agent, _missed_ai_agent),
    RoutingRule("missed-call-voicemail", _missed_to_voicemail, _missed_voicemail),
    RoutingRule("missed-call-hangup", _missed_call, _missed_hangup),
    RoutingRule("va-forward", _forward_to_va, _va_forward),
    RoutingRule("direct-eleven-labs", _direct_to_ai_agent, _direct_ai_agent),
    RoutingRule("direct-voicemail", _always, _direct_voicemail),
)

NO_MATCH_RULE = "no-match"


def evaluate_rules(
    ctx: RoutingContext,
    rules: Sequence[RoutingRule] = DEFAULT_RULES,
) -> Tuple[str, RoutingDecision]:
    """Return ``(rule_name, decision)`` for the first matching rule.

    A table without a catch-all that matches nothing yields voicemail.
    """
    for rule in rules:
        if rule.applies(ctx):
            return rule.name, rule.decide(ctx)
    return NO_MATCH_RULE, ctx.decision(
        Destination.VOICEMAIL,
        "No routing rule matched: falling back to voicemail",
    )


def route_call(
    settings: RoutingSettings,
    call_state: CallState,
    *,
    rules: Sequence[RoutingRule] = DEFAULT_RULES,
    tz: Optional[tzinfo] = None,
) -> RoutingDecision:
    """Route one call; ``tz`` defaults to the configured business timezone."""
    instant = call_state.instant or datetime.now(timezone.utc)
    with bound_call(call_state.call_sid):
        ctx = RoutingContext(
            settings=settings,
            call_state=call_state,
            effective_mode=get_effective_mode(settings, instant, resolve_business_timezone(tz)),
            instant=instant,
        )
        rule_name, decision = evaluate_rules(ctx, rules)

        log_with_context(
            logger,
            logging.INFO,
            "Call routing decided",
            rule=rule_name,
            destination=decision.destination.value,
            effective_mode=decision.effective_mode.value,
            eleven_labs_context=decision.eleven_labs_context.value if decision.eleven_labs_context else None,
            is_va_missed_call=call_state.is_va_missed_call,
            active_call_count=call_state.active_call_count,
            reason=decision.reason,
        )
    return decision


def determine_call_routing(
    settings: RoutingSettings,
    is_va_missed_call: bool = False,
    active_call_count: int = 0,
    instant: Optional[datetime] = None,
    *,
    call_sid: Optional[str] = None,
    rules: Sequence[RoutingRule] = DEFAULT_RULES,
    tz: Optional[tzinfo] = None,
) -> RoutingDecision:
    """Decide how to route one inbound call event.

    Args:
        settings: Tenant routing settings snapshot.
        is_va_missed_call: True when re-invoked after a forward rang out.
        active_call_count: Calls currently active on the line.
        instant: Evaluation time; defaults to now.
        call_sid: Telephony call id, stamped on the decision log.
        rules: Ordered rule table.
        tz: Business timezone; defaults to ``Settings.business_timezone``.

    Returns:
        A freshly built RoutingDecision.
    """
    return route_call(
        settings,
        CallState(
            is_va_missed_call=is_va_missed_call,
            active_call_count=active_call_count,
            instant=instant,
            call_sid=call_sid,
        ),
        rules=rules,
        tz=tz,
    )
