"""Service configuration loaded once at startup.

Usage
-----
Load the full configuration from environment variables::

    config = ServiceConfig.from_env()
    config.github.repository  # "octo/reef"

"""

from __future__ import annotations

import dataclasses as dc

from issuegate.common.env import ConfigError, env_float, env_int, require_env
from issuegate.common.slug import parse_repo_slug
from issuegate.completion.config import CompletionConfig
from issuegate.github.client import GitHubIssuesConfig
from issuegate.slack.client import SlackConfig

__all__ = ["SIGNING_SECRET_ENV", "ConfigError", "ServiceConfig"]

SIGNING_SECRET_ENV = "ISSUEGATE_SLACK_SIGNING_SECRET"

_DEFAULT_MAX_BODY_BYTES = 64 * 1024
_DEFAULT_SHUTDOWN_GRACE_S = 30.0


@dc.dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Immutable configuration injected into every component.

    Attributes
    ----------
    signing_secret
        Slack signing secret used to authenticate inbound requests.
    slack
        Slack Web API client configuration.
    github
        GitHub issues client configuration.
    completion
        Azure OpenAI deployment configuration.
    max_body_bytes
        Largest inbound body the signature middleware will read.
    shutdown_grace_s
        Seconds to wait for pending follow-ups on shutdown.

    """

    signing_secret: bytes = dc.field(repr=False)
    slack: SlackConfig
    github: GitHubIssuesConfig
    completion: CompletionConfig
    max_body_bytes: int = _DEFAULT_MAX_BODY_BYTES
    shutdown_grace_s: float = _DEFAULT_SHUTDOWN_GRACE_S

    @classmethod
    def from_env(cls) -> ServiceConfig:
        """Create configuration from environment variables.

        Reads ``ISSUEGATE_SLACK_SIGNING_SECRET``, ``ISSUEGATE_MAX_BODY_BYTES``
        and ``ISSUEGATE_SHUTDOWN_GRACE_S`` directly, and delegates the
        ``ISSUEGATE_SLACK_*``, ``ISSUEGATE_GITHUB_*`` and ``ISSUEGATE_AOAI_*``
        variables to the client configurations.

        Raises
        ------
        ConfigError
            If a required variable is missing, a number is not positive or
            ``ISSUEGATE_GITHUB_REPO`` is not an ``owner/name`` slug.

        """
        signing_secret = require_env(SIGNING_SECRET_ENV).encode("utf-8")
        github = GitHubIssuesConfig.from_env()
        try:
            parse_repo_slug(github.repository)
        except ValueError as exc:
            raise ConfigError.invalid(
                "ISSUEGATE_GITHUB_REPO",
                github.repository,
                "Must be an owner/name repository slug",
            ) from exc

        return cls(
            signing_secret=signing_secret,
            slack=SlackConfig.from_env(),
            github=github,
            completion=CompletionConfig.from_env(),
            max_body_bytes=env_int("ISSUEGATE_MAX_BODY_BYTES", _DEFAULT_MAX_BODY_BYTES),
            shutdown_grace_s=env_float(
                "ISSUEGATE_SHUTDOWN_GRACE_S", _DEFAULT_SHUTDOWN_GRACE_S
            ),
        )
