"""Tests for trigger criteria."""

import pytest

from hooktrigger.models import Webhook
from hooktrigger.triggers import TriggerCause, UserAgentTrigger


@pytest.mark.parametrize("user_agent", ["", None, "curl/7.68.0", "GitHub-Hookshot/abc"])
def test_empty_pattern_matches_everything(user_agent):
    assert UserAgentTrigger("").accepts(Webhook(user_agent=user_agent))
    assert UserAgentTrigger(None).accepts(Webhook(user_agent=user_agent))


def test_substring_match():
    trigger = UserAgentTrigger("curl")
    assert trigger.accepts(Webhook(user_agent="curl/7.68.0"))
    assert not trigger.accepts(Webhook(user_agent="PostmanRuntime/7"))


def test_match_is_case_sensitive():
    assert not UserAgentTrigger("Curl").accepts(Webhook(user_agent="curl/7.68.0"))


def test_missing_user_agent_does_not_match_pattern():
    assert not UserAgentTrigger("curl").accepts(Webhook(user_agent=None))


def test_trigger_cause_description():
    assert TriggerCause().short_description == "Started by webhook"
    assert TriggerCause("curl/8").short_description == "Started by webhook from curl/8"
