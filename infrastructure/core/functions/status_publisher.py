"""Single-function relays that forward one event source's status messages to Slack."""

from __future__ import annotations

from dataclasses import dataclass

from infrastructure.config.settings import DeploymentSettings
from infrastructure.core.functions.descriptor import FunctionDescriptor, LogRetention, OperationIntent

SLACK_WEBHOOK_URL = "SLACK_WEBHOOK_URL"


@dataclass(frozen=True)
class StatusPublisher:
    name: str
    code_path: str
    event_source: str
    description: str


AMPLIFY_STATUS_PUBLISHER = StatusPublisher(
    name="amplify-status-publisher",
    code_path="src/lambda/functions/amplify_status_publisher",
    event_source="amplify-build-status",
    description="Forwards Amplify build status message from SNS to Slack Webhook.",
)

SCRAPER_STATUS_PUBLISHER = StatusPublisher(
    name="scraper-status-publisher",
    code_path="src/lambda/functions/scraper_status_publisher",
    event_source="scraper-execution-status",
    description="Forwards scraper execution status message from SNS to Slack Webhook.",
)

STATUS_PUBLISHERS: tuple[StatusPublisher, ...] = (AMPLIFY_STATUS_PUBLISHER, SCRAPER_STATUS_PUBLISHER)


def build_status_publisher(publisher: StatusPublisher, settings: DeploymentSettings) -> FunctionDescriptor:
    """Return a fresh descriptor for ``publisher``: 128 MB, 3 s, no role, webhook URL only."""
    environment = settings.require(publisher.name, SLACK_WEBHOOK_URL)
    return FunctionDescriptor(
        name=publisher.name,
        code_path=publisher.code_path,
        handler="handler.main",
        intent=OperationIntent.NOTIFY,
        memory_size=128,
        timeout_seconds=3,
        log_retention=LogRetention.SIX_MONTHS,
        description=publisher.description,
        environment=environment,
    )
