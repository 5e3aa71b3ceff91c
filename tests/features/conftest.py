"""Shared fixtures and steps for the Slack interaction feature tests."""

from __future__ import annotations

import pytest
from pytest_bdd import given, parsers, then, when

from issuegate.completion.errors import CompletionAPIError
from tests.helpers.fakes import FakeGenerator
from tests.helpers.scenario import InteractionContext, build_app, send_request


@pytest.fixture
def interaction_context() -> InteractionContext:
    """Provide empty scenario state."""
    return {}


@given("a running issuegate app with fake Slack, GitHub and AI services")
def given_running_app(interaction_context: InteractionContext) -> None:
    """Build the app around in-memory collaborators."""
    build_app(interaction_context, FakeGenerator())


@given("a running issuegate app whose AI service fails")
def given_failing_ai(interaction_context: InteractionContext) -> None:
    """Build the app with a generator that always errors."""
    build_app(
        interaction_context,
        FakeGenerator(error=CompletionAPIError.http_error(503)),
    )


@when(parsers.parse("I request GET {path}"))
def when_request_get(interaction_context: InteractionContext, path: str) -> None:
    """Issue an unsigned GET request."""
    send_request(interaction_context, "GET", path)


@then(parsers.parse("the response status is {status:d}"))
def then_response_status(interaction_context: InteractionContext, status: int) -> None:
    """Assert the HTTP response status code."""
    response = interaction_context["response"]
    assert response.status_code == status, (
        f"expected status {status}, got {response.status_code}"
    )


@then(parsers.parse('the response text is "{text}"'))
def then_response_text(interaction_context: InteractionContext, text: str) -> None:
    """Assert the exact response body."""
    response = interaction_context["response"]
    assert response.text == text, f"expected {text!r}, got {response.text!r}"


@then("the response body is empty")
def then_response_empty(interaction_context: InteractionContext) -> None:
    """Assert an empty response body."""
    assert interaction_context["response"].text == "", "expected an empty body"


@then("the issue modal was opened")
def then_modal_opened(interaction_context: InteractionContext) -> None:
    """Assert exactly one views.open call was made."""
    assert len(interaction_context["slack"].opened) == 1, "modal not opened"


@then("the issue modal was not opened")
def then_modal_not_opened(interaction_context: InteractionContext) -> None:
    """Assert no views.open call was made."""
    assert interaction_context["slack"].opened == [], "modal opened unexpectedly"


@then("no issue was created")
def then_no_issue(interaction_context: InteractionContext) -> None:
    """Assert the tracker was not called."""
    assert interaction_context["tracker"].issues == [], "issue created unexpectedly"
