"""Backend stack: every workload family's roles and functions plus the status relays."""

from pathlib import Path
from typing import Dict, Union

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from infrastructure.config.types import EnvironmentConfig
from infrastructure.constructs.lambda_functions import (
    FunctionGroupConstruct,
    StatusPublisherConstruct,
    verify_function_sources,
)
from infrastructure.core.description import DeploymentDescription
from infrastructure.core.functions.status_publisher import STATUS_PUBLISHERS


class BackendStack(Stack):
    """Materializes a resolved deployment description's roles and Lambda functions."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        environment: str,
        config: EnvironmentConfig,
        deployment: DeploymentDescription,
        code_root: Union[str, Path] = ".",
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = environment
        self.config = config
        self.deployment = deployment
        self.code_root = code_root

        # Every handler module must exist before any construct is created.
        verify_function_sources(deployment.functions, code_root)

        self._create_function_groups()
        self._create_status_publishers()
        self._create_outputs()

    def _create_function_groups(self) -> None:
        """One construct per workload family; roles never cross family boundaries."""
        self.function_groups: Dict[str, FunctionGroupConstruct] = {}
        for group in self.deployment.groups:
            self.function_groups[group.family] = FunctionGroupConstruct(
                self, f"{group.family}-functions", group=group, code_root=self.code_root
            )

    def _create_status_publishers(self) -> None:
        """Each relay gets its own topic and function so the two fail independently."""
        self.status_publishers: Dict[str, StatusPublisherConstruct] = {}
        event_sources = {publisher.name: publisher.event_source for publisher in STATUS_PUBLISHERS}
        for descriptor in self.deployment.status_publishers:
            event_source = event_sources[descriptor.name]
            self.status_publishers[descriptor.name] = StatusPublisherConstruct(
                self,
                descriptor.name,
                descriptor=descriptor,
                topic_name=f"{event_source}-{self.env_name}",
                display_name=f"{event_source} ({self.env_name})",
                code_root=self.code_root,
            )

    def _create_outputs(self) -> None:
        for name, publisher in self.status_publishers.items():
            CfnOutput(
                self,
                f"{name}-topic-arn",
                value=publisher.topic.topic_arn,
                description=f"SNS topic relayed to Slack by {name}",
            )
