"""Configuration for the Azure OpenAI chat completion client."""

from __future__ import annotations

import dataclasses
import os
import urllib.parse

from issuegate.common.env import env_float, env_url, require_env

# Default configuration values - single source of truth
_DEFAULT_API_VERSION = "2024-02-01"
_DEFAULT_TIMEOUT_S = 30.0
_DEFAULT_TEMPERATURE = 0.3
_DEFAULT_MAX_TOKENS = 300


@dataclasses.dataclass(frozen=True, slots=True)
class CompletionConfig:
    """Configuration for an Azure OpenAI chat completions deployment.

    Attributes
    ----------
    endpoint
        Resource endpoint, e.g. ``https://example.openai.azure.com``.
    api_key
        Key sent in the ``api-key`` header.
    deployment
        Deployment name of the chat model.
    api_version
        Azure OpenAI REST API version.
    timeout_s
        Request timeout in seconds.
    temperature
        Sampling temperature.
    max_tokens
        Maximum tokens in the completion.

    """

    endpoint: str
    api_key: str = dataclasses.field(repr=False)
    deployment: str
    api_version: str = _DEFAULT_API_VERSION
    timeout_s: float = _DEFAULT_TIMEOUT_S
    temperature: float = _DEFAULT_TEMPERATURE
    max_tokens: int = _DEFAULT_MAX_TOKENS

    @property
    def url(self) -> str:
        """Return the chat completions URL for the deployment."""
        deployment = urllib.parse.quote(self.deployment, safe="")
        query = urllib.parse.urlencode({"api-version": self.api_version})
        return (
            f"{self.endpoint.rstrip('/')}/openai/deployments/{deployment}"
            f"/chat/completions?{query}"
        )

    @classmethod
    def from_env(cls) -> CompletionConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``ISSUEGATE_AOAI_ENDPOINT``: Required resource endpoint
        - ``ISSUEGATE_AOAI_API_KEY``: Required API key
        - ``ISSUEGATE_AOAI_DEPLOYMENT``: Required deployment name
        - ``ISSUEGATE_AOAI_API_VERSION``: Optional API version
        - ``ISSUEGATE_AOAI_TIMEOUT_S``: Optional timeout in seconds

        Raises
        ------
        ConfigError
            If a required variable is missing, the endpoint is not an http(s) URL
            or the timeout is invalid.

        """
        return cls(
            endpoint=env_url("ISSUEGATE_AOAI_ENDPOINT"),
            api_key=require_env("ISSUEGATE_AOAI_API_KEY"),
            deployment=require_env("ISSUEGATE_AOAI_DEPLOYMENT"),
            api_version=os.environ.get(
                "ISSUEGATE_AOAI_API_VERSION", _DEFAULT_API_VERSION
            ),
            timeout_s=env_float("ISSUEGATE_AOAI_TIMEOUT_S", _DEFAULT_TIMEOUT_S),
        )
