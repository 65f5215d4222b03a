"""Constructs materializing role and function descriptors as CDK resources."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from aws_cdk import Duration, aws_iam as iam, aws_lambda as lambda_, aws_logs as logs, aws_sns as sns
from aws_cdk import aws_sns_subscriptions as subscriptions
from aws_cdk.aws_lambda_python_alpha import PythonFunction
from constructs import Construct

from infrastructure.core.errors import MissingFunctionSource
from infrastructure.core.functions.descriptor import FunctionDescriptor, LogRetention
from infrastructure.core.functions.families import FunctionGroup
from infrastructure.core.iam import utils as iam_utils
from infrastructure.core.iam.role_catalog import AccessRole

_RUNTIMES = {
    "python3.12": lambda_.Runtime.PYTHON_3_12,
}

_LOG_RETENTION = {
    LogRetention.ONE_DAY: logs.RetentionDays.ONE_DAY,
    LogRetention.THREE_DAYS: logs.RetentionDays.THREE_DAYS,
    LogRetention.ONE_WEEK: logs.RetentionDays.ONE_WEEK,
    LogRetention.TWO_WEEKS: logs.RetentionDays.TWO_WEEKS,
    LogRetention.ONE_MONTH: logs.RetentionDays.ONE_MONTH,
    LogRetention.THREE_MONTHS: logs.RetentionDays.THREE_MONTHS,
    LogRetention.SIX_MONTHS: logs.RetentionDays.SIX_MONTHS,
    LogRetention.ONE_YEAR: logs.RetentionDays.ONE_YEAR,
}


def _managed_policy(arn: str) -> iam.IManagedPolicy:
    name = iam_utils.managed_policy_name(arn)
    if name != arn:
        return iam.ManagedPolicy.from_aws_managed_policy_name(name)
    return iam.ManagedPolicy.from_managed_policy_arn_static(arn)  # pragma: no cover


def handler_path(descriptor: FunctionDescriptor, code_root: Union[str, Path] = ".") -> Path:
    """Path of the handler module PythonFunction bundles for ``descriptor``."""
    return Path(code_root) / descriptor.code_path / f"{descriptor.handler_module}.py"


def verify_function_sources(descriptors: Iterable[FunctionDescriptor], code_root: Union[str, Path] = ".") -> None:
    """Raise before synthesis if any function's handler module is missing."""
    for descriptor in descriptors:
        path = handler_path(descriptor, code_root)
        if not path.is_file():
            raise MissingFunctionSource(descriptor.name, str(path))


def create_role(scope: Construct, role: AccessRole) -> iam.Role:
    """Create an IAM role carrying exactly the descriptor's managed policies."""
    return iam.Role(
        scope,
        role.name,
        role_name=role.name,
        assumed_by=iam.ServicePrincipal(role.principal),
        path=role.path,
        description=role.description,
        managed_policies=[_managed_policy(arn) for arn in role.policies],
    )


def create_function(
    scope: Construct,
    descriptor: FunctionDescriptor,
    role: Optional[iam.IRole] = None,
    *,
    code_root: Union[str, Path] = ".",
) -> lambda_.IFunction:
    """Create a Lambda function; without ``role`` CDK synthesizes a basic execution role."""
    runtime = _RUNTIMES.get(descriptor.runtime)
    if runtime is None:
        raise ValueError(f"Unsupported runtime for {descriptor.name}: {descriptor.runtime}")

    log_group = logs.LogGroup(
        scope,
        f"{descriptor.name}-logs",
        log_group_name=f"/aws/lambda/{descriptor.name}",
        retention=_LOG_RETENTION[descriptor.log_retention],
    )

    return PythonFunction(
        scope,
        descriptor.name,
        function_name=descriptor.name,
        description=descriptor.description or None,
        runtime=runtime,
        entry=str(Path(code_root) / descriptor.code_path),
        index=f"{descriptor.handler_module}.py",
        handler=descriptor.handler_function,
        memory_size=descriptor.memory_size,
        timeout=Duration.seconds(descriptor.timeout_seconds),
        log_group=log_group,
        role=role,
        environment=dict(descriptor.environment),
    )


class FunctionGroupConstruct(Construct):
    """Provision one workload family: its access roles and the functions bound to them."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        group: FunctionGroup,
        code_root: Union[str, Path] = ".",
    ) -> None:
        super().__init__(scope, construct_id)
        self.family = group.family

        self._roles: Dict[str, iam.Role] = {role.name: create_role(self, role) for role in group.roles}
        self._functions: Dict[str, lambda_.IFunction] = {}
        for descriptor in group.functions:
            role = self._roles[descriptor.role.name] if descriptor.role is not None else None
            self._functions[descriptor.name] = create_function(self, descriptor, role, code_root=code_root)

    @property
    def roles(self) -> Dict[str, iam.Role]:
        return dict(self._roles)

    @property
    def functions(self) -> Dict[str, lambda_.IFunction]:
        return dict(self._functions)


class StatusPublisherConstruct(Construct):
    """One notification relay: its SNS topic and the role-less function subscribed to it."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        descriptor: FunctionDescriptor,
        topic_name: str,
        display_name: Optional[str] = None,
        code_root: Union[str, Path] = ".",
    ) -> None:
        super().__init__(scope, construct_id)

        self.topic = sns.Topic(self, "Topic", topic_name=topic_name, display_name=display_name)
        self.function = create_function(self, descriptor, code_root=code_root)
        self.topic.add_subscription(subscriptions.LambdaSubscription(self.function))
