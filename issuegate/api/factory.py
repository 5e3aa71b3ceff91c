"""Factory for building Slack endpoint dependencies from configuration.

This module provides ``build_dependencies()`` which creates the shared HTTP
clients once per process and wires them into the interaction handlers.

Usage
-----
Build dependencies for the API layer::

    from issuegate.api.factory import build_dependencies

    deps = build_dependencies(ServiceConfig.from_env())

"""

from __future__ import annotations

import typing as typ

from issuegate.api.app import AppDependencies
from issuegate.background import BackgroundTasks
from issuegate.completion.client import AzureOpenAICompletionClient
from issuegate.github.client import GitHubIssuesClient
from issuegate.interactions.commands import CommandDispatcher
from issuegate.interactions.observability import InteractionEventLogger
from issuegate.interactions.submissions import SubmissionHandler
from issuegate.slack.client import SlackWebClient

if typ.TYPE_CHECKING:
    from issuegate.config import ServiceConfig

__all__ = ["build_dependencies"]


def build_dependencies(config: ServiceConfig) -> AppDependencies:
    """Build ``AppDependencies`` from service configuration.

    Parameters
    ----------
    config
        Loaded service configuration.

    Returns
    -------
    AppDependencies
        Handlers, tracker and client closers for ``create_app``.

    """
    slack = SlackWebClient(config.slack)
    github = GitHubIssuesClient(config.github)
    completion = AzureOpenAICompletionClient(config.completion)
    event_logger = InteractionEventLogger()

    return AppDependencies(
        signing_secret=config.signing_secret,
        dispatcher=CommandDispatcher(
            slack=slack,
            generator=completion,
            repository=github.repository,
            event_logger=event_logger,
        ),
        submissions=SubmissionHandler(
            tracker=github,
            generator=completion,
            repository=github.repository,
            event_logger=event_logger,
        ),
        tasks=BackgroundTasks(),
        max_body_bytes=config.max_body_bytes,
        shutdown_grace_s=config.shutdown_grace_s,
        closers=(slack.aclose, github.aclose, completion.aclose),
    )
