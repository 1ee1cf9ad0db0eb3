"""
Tests for effective mode resolution.
"""

import pytest

from callrouting.routing.models import AgentMode, EffectiveMode, RoutingSettings
from callrouting.routing.mode import get_effective_mode


class TestAutoMode:
    def test_auto_in_business_hours(self, make_settings, uk_time):
        assert get_effective_mode(make_settings(agent_mode="auto"), uk_time(1, 10)) == EffectiveMode.IN_HOURS

    def test_auto_outside_business_hours(self, make_settings, uk_time):
        assert get_effective_mode(make_settings(agent_mode="auto"), uk_time(1, 20)) == EffectiveMode.OUT_OF_HOURS

    def test_auto_is_the_default(self, uk_time):
        assert RoutingSettings().agent_mode == AgentMode.AUTO
        assert get_effective_mode(RoutingSettings(), uk_time(6, 10)) == EffectiveMode.OUT_OF_HOURS


class TestForcedModes:
    """Forced modes ignore the clock entirely."""

    @pytest.mark.parametrize("day, hour", [(1, 10), (7, 23), (6, 0), (3, 3)])
    def test_force_in_hours(self, make_settings, uk_time, day, hour):
        settings = make_settings(agent_mode="force-in-hours")
        assert get_effective_mode(settings, uk_time(day, hour)) == EffectiveMode.IN_HOURS

    @pytest.mark.parametrize("day, hour", [(1, 10), (5, 17), (2, 8)])
    def test_force_out_of_hours(self, make_settings, uk_time, day, hour):
        settings = make_settings(agent_mode="force-out-of-hours")
        assert get_effective_mode(settings, uk_time(day, hour)) == EffectiveMode.OUT_OF_HOURS

    @pytest.mark.parametrize("day, hour", [(1, 10), (7, 23)])
    def test_voicemail_only(self, make_settings, uk_time, day, hour):
        settings = make_settings(agent_mode="voicemail-only")
        assert get_effective_mode(settings, uk_time(day, hour)) == EffectiveMode.VOICEMAIL_ONLY


class TestUnknownMode:
    def test_unknown_mode_behaves_as_auto(self, make_settings, uk_time):
        settings = make_settings(agent_mode="turbo")
        assert settings.agent_mode == AgentMode.AUTO
        assert get_effective_mode(settings, uk_time(1, 10)) == EffectiveMode.IN_HOURS
        assert get_effective_mode(settings, uk_time(1, 22)) == EffectiveMode.OUT_OF_HOURS

    def test_effective_mode_ignores_call_signals(self, make_settings, uk_time):
        # Agent ids and forwarding do not influence the mode
        bare = make_settings(forward_enabled=False, eleven_labs_agent_id="", eleven_labs_busy_agent_id="busy")
        assert get_effective_mode(bare, uk_time(1, 10)) == get_effective_mode(make_settings(), uk_time(1, 10))
