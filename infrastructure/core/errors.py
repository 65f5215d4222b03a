"""Construction-time errors raised while building the deployment description."""

from __future__ import annotations

from typing import Iterable


class DeploymentDescriptionError(Exception):
    """Base class for declarative-input errors. Not recoverable in-process."""


class DuplicateRoleName(DeploymentDescriptionError):
    def __init__(self, role_name: str) -> None:
        super().__init__(f"Role name already defined in this deployment: {role_name}")
        self.role_name = role_name


class DuplicatePolicyReference(DeploymentDescriptionError):
    def __init__(self, role_name: str, policy: str) -> None:
        super().__init__(f"Policy '{policy}' referenced more than once for role '{role_name}'")
        self.role_name = role_name
        self.policy = policy


class EmptyPolicySet(DeploymentDescriptionError):
    def __init__(self, role_name: str) -> None:
        super().__init__(f"Role '{role_name}' must reference at least one policy")
        self.role_name = role_name


class MissingRequiredEnvironment(DeploymentDescriptionError):
    """A function (or app) requires a named configuration value that was not supplied."""

    def __init__(self, owner: str, names: Iterable[str]) -> None:
        self.owner = owner
        self.names = tuple(names)
        super().__init__(f"'{owner}' requires configuration values: {', '.join(self.names)}")


class UnboundPrivilegeMismatch(DeploymentDescriptionError):
    """The bound role does not match the least privilege the operation intent needs."""

    def __init__(self, function_name: str, intent: str, bound: str, expected: str) -> None:
        super().__init__(
            f"Function '{function_name}' with intent '{intent}' is bound to {bound}; expected {expected}"
        )
        self.function_name = function_name
        self.intent = intent
        self.bound = bound
        self.expected = expected


class InvalidFunctionDescriptor(DeploymentDescriptionError):
    def __init__(self, function_name: str, reason: str) -> None:
        super().__init__(f"Invalid function '{function_name}': {reason}")
        self.function_name = function_name
        self.reason = reason


class DuplicateFunctionName(DeploymentDescriptionError):
    def __init__(self, function_name: str) -> None:
        super().__init__(f"Function name already defined in this deployment: {function_name}")
        self.function_name = function_name


class UnknownApplication(DeploymentDescriptionError):
    def __init__(self, app_name: str) -> None:
        super().__init__(f"Unknown frontend application: {app_name}")
        self.app_name = app_name


class MissingFunctionSource(DeploymentDescriptionError):
    """A function's code path has no handler module to bundle."""

    def __init__(self, function_name: str, path: str) -> None:
        super().__init__(f"Function '{function_name}' has no handler module at: {path}")
        self.function_name = function_name
        self.path = path
