"""Issue modal submission handling."""

from __future__ import annotations

import typing as typ

from issuegate.completion.errors import CompletionError
from issuegate.completion.prompts import build_remediation_prompt
from issuegate.github.errors import GitHubError
from issuegate.github.models import IssueRequest

from .models import InteractionOutcome, InteractionReply
from .observability import InteractionEventLogger
from .views import build_issue_created_view, build_submission_errors

if typ.TYPE_CHECKING:
    from issuegate.completion.client import TextGenerator
    from issuegate.github.client import IssueTracker
    from issuegate.github.models import IssueResult

    from .models import ViewSubmission

__all__ = ["ISSUE_FAILED_TEXT", "RemediationTipsFollowUp", "SubmissionHandler"]

ISSUE_FAILED_TEXT = "Could not create the issue. Please try again."


class RemediationTipsFollowUp:
    """Generate remediation tips and post them as an issue comment.

    Runs after the modal has been updated, so failures are only logged.
    """

    name = "remediation_tips"

    def __init__(
        self,
        *,
        tracker: IssueTracker,
        generator: TextGenerator,
        issue: IssueResult,
        submission: ViewSubmission,
        event_logger: InteractionEventLogger | None = None,
    ) -> None:
        """Store collaborators and the created issue."""
        self._tracker = tracker
        self._generator = generator
        self._issue = issue
        self._submission = submission
        self._events = event_logger or InteractionEventLogger()

    @property
    def issue(self) -> IssueResult:
        """Issue the tips are posted to."""
        return self._issue

    async def run(self) -> None:
        """Generate tips and comment on the issue."""
        prompt = build_remediation_prompt(
            self._submission.title, self._submission.description
        )
        try:
            tips = await self._generator.complete(prompt)
            await self._tracker.create_comment(self._issue.number, tips)
        except (CompletionError, GitHubError) as exc:
            self._events.log_follow_up_failed(follow_up=self.name, error=exc)
            return
        self._events.log_follow_up_delivered(follow_up=self.name)


class SubmissionHandler:
    """Create an issue from a modal submission.

    Parameters
    ----------
    tracker
        Issue tracker the issue is created in.
    generator
        Text generator used for optional remediation tips.
    repository
        ``owner/name`` slug of the tracker, used in log records.
    event_logger
        Event logger; a default instance is used when omitted.

    """

    def __init__(
        self,
        *,
        tracker: IssueTracker,
        generator: TextGenerator,
        repository: str,
        event_logger: InteractionEventLogger | None = None,
    ) -> None:
        """Store collaborators for later submissions."""
        self._tracker = tracker
        self._generator = generator
        self._repository = repository
        self._events = event_logger or InteractionEventLogger()

    async def handle(self, submission: ViewSubmission) -> InteractionOutcome:
        """Create the issue and replace the modal with a link to it.

        Returns
        -------
        InteractionOutcome
            On success a ``response_action: update`` reply, plus a
            :class:`RemediationTipsFollowUp` when AI tips were requested.
            On a tracker failure a ``response_action: errors`` reply that
            keeps the modal open.

        """
        request = IssueRequest(
            title=submission.title,
            body=submission.description,
            labels=submission.labels,
        )
        try:
            issue = await self._tracker.create_issue(request)
        except Exception as exc:  # noqa: BLE001 - the modal always gets a reply
            self._events.log_issue_failed(repository=self._repository, error=exc)
            return InteractionOutcome(
                reply=InteractionReply.json(build_submission_errors(ISSUE_FAILED_TEXT))
            )

        self._events.log_issue_created(
            repository=self._repository, number=issue.number
        )
        follow_up = None
        if submission.ai_requested:
            follow_up = RemediationTipsFollowUp(
                tracker=self._tracker,
                generator=self._generator,
                issue=issue,
                submission=submission,
                event_logger=self._events,
            )
        return InteractionOutcome(
            reply=InteractionReply.json(build_issue_created_view(issue)),
            follow_up=follow_up,
        )
