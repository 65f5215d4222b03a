"""Named secrets and cross-cutting values captured from the process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from infrastructure.core.errors import MissingRequiredEnvironment


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class DeploymentSettings:
    """Snapshot of the deployment's named configuration values.

    Field names match the environment variable names lower-cased. Values are captured
    once by :meth:`from_env`; nothing re-reads the environment afterwards.
    """

    google_api_service_account_info: Optional[str] = None
    slack_webhook_url: Optional[str] = None
    github_oauth_token: Optional[str] = None
    website_dev_pass: Optional[str] = None
    aws_account_id: Optional[str] = None
    aws_region: Optional[str] = None
    cognito_affiliate_region: Optional[str] = None
    google_oauth_client_id: Optional[str] = None
    google_oauth_client_secret: Optional[str] = None
    google_api_key: Optional[str] = None
    slack_channel_id: Optional[str] = None
    slack_workspace_id: Optional[str] = None
    bit_token: Optional[str] = None
    deploy_key: Optional[str] = None
    stage: Optional[str] = None

    def __post_init__(self) -> None:
        for item in fields(self):
            object.__setattr__(self, item.name, _clean(getattr(self, item.name)))

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "DeploymentSettings":
        source = os.environ if environ is None else environ
        return DeploymentSettings(**{item.name: source.get(item.name.upper()) for item in fields(DeploymentSettings)})

    def get(self, name: str) -> Optional[str]:
        """Look up a value by its environment variable name (``SLACK_WEBHOOK_URL``)."""
        attr = name.lower()
        if attr not in {item.name for item in fields(self)}:
            raise KeyError(f"Unknown configuration value: {name}")
        return getattr(self, attr)

    def require(self, owner: str, *names: str) -> dict[str, str]:
        """Return ``{NAME: value}`` for every name, or raise if any is missing."""
        missing = [name for name in names if self.get(name) is None]
        if missing:
            raise MissingRequiredEnvironment(owner, missing)
        return {name: str(self.get(name)) for name in names}
