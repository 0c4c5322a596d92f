"""Tests for matching webhooks to jobs and dispatching them."""

import pytest

from hooktrigger.errors import MalformedPayload, MissingContentType, UnsupportedContentType
from hooktrigger.models import Webhook
from hooktrigger.webhooks import DispatchResult, find_jobs_to_trigger, handle_webhook

FORM = "application/x-www-form-urlencoded"


async def test_matching_jobs_are_submitted(registry, runner):
    registry.register("curl-job", "echo curl", user_agent="curl")
    registry.register("postman-job", "echo postman", user_agent="Postman")
    registry.register("any-job", "echo any", user_agent="")

    result = await handle_webhook(b"subject=hello", FORM, "curl/7.68.0", registry, runner)

    assert [job.name for job in result.jobs] == ["curl-job", "any-job"]
    assert result.status_code == 200
    assert result.message == "Triggered 2 build(s)."
    assert [job.name for job, _, _ in runner.submitted] == ["curl-job", "any-job"]

    _, cause, env = runner.submitted[0]
    assert cause.user_agent == "curl/7.68.0"
    assert env["HOOK_SUBJECT"] == "hello"
    assert env["HOOK_PAYLOAD"] == '{"subject": "hello"}'


async def test_disabled_and_unconfigured_jobs_are_skipped(registry, runner):
    registry.register("disabled", "echo hi", enabled=False)
    registry.register("no-command", "   ")

    result = await handle_webhook(b"a=1", FORM, "curl", registry, runner)

    assert result.jobs == []
    assert runner.submitted == []


async def test_no_match_reports_501(registry, runner):
    result = await handle_webhook(b'{"a": 1}', "application/json", "curl", registry, runner)
    assert result.status_code == 501
    assert result.message == "Triggered 0 build(s)."


async def test_user_agent_set_from_header(registry, runner):
    result = await handle_webhook(b"{}", "application/json", None, registry, runner)
    assert result.hook.user_agent == ""

    result = await handle_webhook(b"{}", "application/json", "GitHub-Hookshot/1", registry, runner)
    assert result.hook.user_agent == "GitHub-Hookshot/1"


async def test_custom_prefix(registry, runner):
    registry.register("job", "true")
    await handle_webhook(b"buildId=9", FORM, "", registry, runner, prefix="CI_")
    _, _, env = runner.submitted[0]
    assert env["CI_BUILD_ID"] == "9"


@pytest.mark.parametrize("content_type", [None, "", "   "])
async def test_missing_content_type(registry, runner, content_type):
    registry.register("job", "true")
    with pytest.raises(MissingContentType) as exc_info:
        await handle_webhook(b"a=1", content_type, "curl", registry, runner)
    assert exc_info.value.status_code == 415
    assert runner.submitted == []


async def test_decode_errors_stop_dispatch(registry, runner):
    registry.register("job", "true")
    with pytest.raises(UnsupportedContentType):
        await handle_webhook(b"a=1", "text/plain", "curl", registry, runner)
    with pytest.raises(MalformedPayload):
        await handle_webhook(b"not json", "application/json", "curl", registry, runner)
    assert runner.submitted == []


async def test_find_jobs_to_trigger(registry):
    registry.register("a", "true", user_agent="bot")
    registry.register("b", "true", user_agent="human")

    jobs = await find_jobs_to_trigger(Webhook(user_agent="robot"), registry)

    assert [job.name for job in jobs] == ["a"]


def test_dispatch_result_status():
    assert DispatchResult(Webhook()).status_code == 501
