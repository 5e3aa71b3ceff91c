"""Unit tests for the Slack webhook resource wired through create_app().

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_slack_resource.py

"""

from __future__ import annotations

import contextlib
import time
import typing as typ
import urllib.parse
from http import HTTPStatus

import falcon.testing
import pytest

from issuegate.api.app import create_app
from issuegate.background import BackgroundTasks
from issuegate.github.errors import GitHubAPIError
from issuegate.interactions.commands import ACK_TEXT, FALLBACK_TEXT
from issuegate.interactions.submissions import ISSUE_FAILED_TEXT
from issuegate.slack.errors import SlackAPIError
from tests.helpers.fakes import (
    RESPONSE_URL,
    FakeGenerator,
    FakeIssueTracker,
    FakeSlackClient,
    fake_dependencies,
    interaction_body,
    signed_headers,
    slash_command_body,
    view_submission_payload,
)


def _signed(body: bytes) -> dict[str, str]:
    return signed_headers(body, int(time.time()))


class TestSlashCommandEndpoint:
    """POST /slack/commands."""

    @pytest.mark.asyncio
    async def test_plain_command_opens_modal(self) -> None:
        """A command without text opens the modal and acknowledges."""
        slack = FakeSlackClient()
        app = create_app(fake_dependencies(slack=slack))
        body = slash_command_body()

        async with falcon.testing.ASGIConductor(app) as conductor:
            result = await conductor.simulate_post(
                "/slack/commands", body=body, headers=_signed(body)
            )

        assert result.status_code == HTTPStatus.OK
        assert result.text == ACK_TEXT
        assert result.headers["content-type"].startswith("text/plain")
        assert [trigger for trigger, _ in slack.opened] == [
            "13345224609.738474920.8088930838d88f008e0"
        ]
        assert slack.attempted == []

    @pytest.mark.asyncio
    async def test_free_text_answer_delivered_after_reply(self) -> None:
        """Free text is answered through the response URL after the ack."""
        slack = FakeSlackClient()
        generator = FakeGenerator("Escape output.")
        tasks = BackgroundTasks()
        app = create_app(
            fake_dependencies(slack=slack, generator=generator, tasks=tasks)
        )
        body = slash_command_body(text="how do I fix XSS?")

        async with falcon.testing.ASGIConductor(app) as conductor:
            result = await conductor.simulate_post(
                "/slack/commands", body=body, headers=_signed(body)
            )
            assert result.text == ACK_TEXT
            assert await tasks.drain(timeout=1.0) is True

        assert generator.prompts == ["how do I fix XSS?"]
        assert [(url, message.text) for url, message in slack.delivered] == [
            (RESPONSE_URL, "Escape output.")
        ]

    @pytest.mark.asyncio
    async def test_modal_and_delivery_failures_still_acknowledge(self) -> None:
        """Slack failures never change the synchronous reply."""
        slack = FakeSlackClient(
            open_view_error=SlackAPIError.api_error("views.open", "expired_trigger_id"),
            post_errors=[SlackAPIError.http_error("response_url", 500)],
        )
        tasks = BackgroundTasks()
        app = create_app(fake_dependencies(slack=slack, tasks=tasks))
        body = slash_command_body(text="help")

        async with falcon.testing.ASGIConductor(app) as conductor:
            result = await conductor.simulate_post(
                "/slack/commands", body=body, headers=_signed(body)
            )
            await tasks.drain(timeout=1.0)

        assert result.status_code == HTTPStatus.OK
        assert result.text == ACK_TEXT
        assert [message.text for _, message in slack.delivered] == [FALLBACK_TEXT]


class TestInteractionEndpoint:
    """POST /slack/interactions."""

    @pytest.mark.asyncio
    async def test_submission_creates_issue(self) -> None:
        """A modal submission creates an issue and updates the modal."""
        tracker = FakeIssueTracker()
        app = create_app(fake_dependencies(tracker=tracker))
        body = interaction_body(view_submission_payload(labels="security"))

        async with falcon.testing.ASGIConductor(app) as conductor:
            result = await conductor.simulate_post(
                "/slack/interactions", body=body, headers=_signed(body)
            )

        assert result.status_code == HTTPStatus.OK
        assert result.json["response_action"] == "update"
        assert "<https://example/42|#42>" in result.text
        assert [issue.title for issue in tracker.issues] == ["Bug X"]
        assert tracker.issues[0].labels == ("security",)

    @pytest.mark.asyncio
    async def test_tracker_failure_returns_inline_error(self) -> None:
        """A tracker failure keeps the modal open with an error."""
        tracker = FakeIssueTracker(error=GitHubAPIError.http_error(502))
        app = create_app(fake_dependencies(tracker=tracker))
        body = interaction_body(view_submission_payload())

        async with falcon.testing.ASGIConductor(app) as conductor:
            result = await conductor.simulate_post(
                "/slack/interactions", body=body, headers=_signed(body)
            )

        assert result.status_code == HTTPStatus.OK
        assert result.json == {
            "response_action": "errors",
            "errors": {"title_b": ISSUE_FAILED_TEXT},
        }

    @pytest.mark.asyncio
    async def test_ai_tips_commented_after_reply(self) -> None:
        """Requested remediation tips are posted as an issue comment."""
        tracker = FakeIssueTracker()
        tasks = BackgroundTasks()
        app = create_app(fake_dependencies(tracker=tracker, tasks=tasks))
        body = interaction_body(view_submission_payload(ai_requested=True))

        async with falcon.testing.ASGIConductor(app) as conductor:
            await conductor.simulate_post(
                "/slack/interactions", body=body, headers=_signed(body)
            )
            assert await tasks.drain(timeout=1.0) is True

        assert tracker.comments == [(42, "Use parameterised queries.")]

    @pytest.mark.asyncio
    async def test_unrecognized_interaction_gets_empty_200(self) -> None:
        """Other interaction types are acknowledged without collaborator calls."""
        slack = FakeSlackClient()
        generator = FakeGenerator()
        tracker = FakeIssueTracker()
        tasks = BackgroundTasks()
        app = create_app(
            fake_dependencies(
                slack=slack, generator=generator, tracker=tracker, tasks=tasks
            )
        )
        body = interaction_body({"type": "block_actions", "actions": []})

        async with falcon.testing.ASGIConductor(app) as conductor:
            result = await conductor.simulate_post(
                "/slack/interactions", body=body, headers=_signed(body)
            )

        assert result.status_code == HTTPStatus.OK
        assert result.text == ""
        assert tasks.pending == 0
        assert slack.opened == []
        assert slack.attempted == []
        assert generator.prompts == []
        assert tracker.issues == []
        assert tracker.comments == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            b"hello=world",
            urllib.parse.urlencode({"payload": "{not json"}).encode(),
            b"command=%2Fissue&text=no-trigger",
        ],
    )
    async def test_undecodable_payload_gets_empty_200(self, body: bytes) -> None:
        """Signed but unusable payloads are acknowledged with an empty body."""
        slack = FakeSlackClient()
        tracker = FakeIssueTracker()
        app = create_app(fake_dependencies(slack=slack, tracker=tracker))

        async with falcon.testing.ASGIConductor(app) as conductor:
            result = await conductor.simulate_post(
                "/slack/interactions", body=body, headers=_signed(body)
            )

        assert result.status_code == HTTPStatus.OK
        assert result.text == ""
        assert slack.opened == []
        assert tracker.issues == []


@pytest.mark.asyncio
async def test_unsigned_request_never_reaches_handlers() -> None:
    """Signature failures are rejected before any handler runs."""
    slack = FakeSlackClient()
    app = create_app(fake_dependencies(slack=slack))
    body = slash_command_body()

    async with falcon.testing.ASGIConductor(app) as conductor:
        result = await conductor.simulate_post(
            "/slack/commands",
            body=body,
            headers=signed_headers(body, int(time.time()), secret=b"wrong"),
        )

    assert result.status_code == HTTPStatus.UNAUTHORIZED
    assert result.text == "invalid signature"
    assert slack.opened == []


@pytest.mark.asyncio
async def test_unexpected_collaborator_errors_still_acknowledge() -> None:
    """Errors outside the client error families never become a 500."""
    slack = FakeSlackClient(open_view_error=RuntimeError("views.open exploded"))
    tracker = FakeIssueTracker(error=RuntimeError("tracker exploded"))
    app = create_app(fake_dependencies(slack=slack, tracker=tracker))
    command = slash_command_body()
    submission = interaction_body(view_submission_payload())

    async with falcon.testing.ASGIConductor(app) as conductor:
        command_result = await conductor.simulate_post(
            "/slack/commands", body=command, headers=_signed(command)
        )
        submission_result = await conductor.simulate_post(
            "/slack/interactions", body=submission, headers=_signed(submission)
        )

    assert command_result.status_code == HTTPStatus.OK
    assert command_result.text == ACK_TEXT
    assert submission_result.status_code == HTTPStatus.OK
    assert submission_result.json == {
        "response_action": "errors",
        "errors": {"title_b": ISSUE_FAILED_TEXT},
    }


class TestFailedResponseSend:
    """A reply that cannot be written still releases its follow-up."""

    @staticmethod
    def _scope(body: bytes) -> dict[str, typ.Any]:
        headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in _signed(body).items()
        ]
        headers.append((b"content-length", str(len(body)).encode("ascii")))
        return {
            "type": "http",
            "asgi": {"version": "3.0", "spec_version": "2.3"},
            "http_version": "1.1",
            "method": "POST",
            "scheme": "http",
            "path": "/slack/commands",
            "raw_path": b"/slack/commands",
            "root_path": "",
            "query_string": b"",
            "headers": headers,
            "client": ("127.0.0.1", 50000),
            "server": ("testserver", 80),
        }

    @pytest.mark.asyncio
    async def test_follow_up_runs_when_send_fails(self) -> None:
        """A disconnected client does not leave the follow-up pending."""
        slack = FakeSlackClient()
        tasks = BackgroundTasks(send_timeout_s=0.05)
        app = create_app(fake_dependencies(slack=slack, tasks=tasks))
        body = slash_command_body(text="how do I fix XSS?")
        messages = [{"type": "http.request", "body": body, "more_body": False}]

        async def receive() -> dict[str, typ.Any]:
            if messages:
                return messages.pop(0)
            return {"type": "http.disconnect"}

        async def send(_message: dict[str, typ.Any]) -> None:
            msg = "client went away"
            raise OSError(msg)

        with contextlib.suppress(OSError):
            await app(self._scope(body), receive, send)

        assert await tasks.drain(timeout=1.0) is True
        assert tasks.pending == 0
        assert [message.text for _, message in slack.delivered] == [
            "Use parameterised queries."
        ]
