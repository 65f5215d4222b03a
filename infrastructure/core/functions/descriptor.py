"""Immutable description of one deployable Lambda function."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from infrastructure.core.errors import InvalidFunctionDescriptor, UnboundPrivilegeMismatch
from infrastructure.core.iam.role_catalog import DEFAULT_EXECUTION_IDENTITY, AccessLevel, AccessRole

PYTHON_RUNTIME = "python3.12"
MAX_TIMEOUT_SECONDS = 900


class OperationIntent(str, enum.Enum):
    RETRIEVE = "retrieve"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    TRANSFORM = "transform"
    IMPORT = "import"
    EXPORT = "export"
    NOTIFY = "notify"
    VALIDATE = "validate"

    @property
    def required_access(self) -> Optional[AccessLevel]:
        """Least access level this intent needs; None means no persistent-store access."""
        if self is OperationIntent.RETRIEVE:
            return AccessLevel.READ_ONLY
        if self in WRITE_INTENTS:
            return AccessLevel.READ_WRITE
        return None


WRITE_INTENTS = frozenset({OperationIntent.CREATE, OperationIntent.UPDATE, OperationIntent.DELETE})
STORELESS_INTENTS = frozenset(
    {
        OperationIntent.TRANSFORM,
        OperationIntent.IMPORT,
        OperationIntent.EXPORT,
        OperationIntent.NOTIFY,
        OperationIntent.VALIDATE,
    }
)


class LogRetention(enum.IntEnum):
    """Allowed CloudWatch log retention periods, in days."""

    ONE_DAY = 1
    THREE_DAYS = 3
    ONE_WEEK = 7
    TWO_WEEKS = 14
    ONE_MONTH = 30
    THREE_MONTHS = 90
    SIX_MONTHS = 180
    ONE_YEAR = 365


@dataclass(frozen=True)
class FunctionDescriptor:
    name: str
    code_path: str
    handler: str
    intent: OperationIntent
    memory_size: int
    timeout_seconds: int
    log_retention: LogRetention
    description: str = ""
    runtime: str = PYTHON_RUNTIME
    role: Optional[AccessRole] = None
    environment: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not str(self.name or "").strip():
            raise InvalidFunctionDescriptor(repr(self.name), "name must be provided")
        if not str(self.code_path or "").strip():
            raise InvalidFunctionDescriptor(self.name, "code path must be provided")
        if "." not in self.handler:
            raise InvalidFunctionDescriptor(self.name, f"handler must be '<module>.<function>', got '{self.handler}'")
        if isinstance(self.memory_size, bool) or not isinstance(self.memory_size, int) or self.memory_size <= 0:
            raise InvalidFunctionDescriptor(self.name, f"memory size must be a positive integer, got {self.memory_size}")
        if (
            isinstance(self.timeout_seconds, bool)
            or not isinstance(self.timeout_seconds, int)
            or not 0 < self.timeout_seconds <= MAX_TIMEOUT_SECONDS
        ):
            raise InvalidFunctionDescriptor(
                self.name, f"timeout must be within 1..{MAX_TIMEOUT_SECONDS} seconds, got {self.timeout_seconds}"
            )
        if not isinstance(self.log_retention, LogRetention):
            raise InvalidFunctionDescriptor(self.name, f"unsupported log retention: {self.log_retention}")

        for key, value in self.environment.items():
            if not str(key or "").strip():
                raise InvalidFunctionDescriptor(self.name, "environment variable names must be non-empty")
            if not isinstance(value, str):
                raise InvalidFunctionDescriptor(self.name, f"environment variable '{key}' must be a string")
        object.__setattr__(self, "environment", MappingProxyType(dict(self.environment)))

        self._check_privilege()

    def _check_privilege(self) -> None:
        expected = self.intent.required_access
        if expected is None:
            if self.role is not None:
                raise UnboundPrivilegeMismatch(self.name, self.intent.value, f"role '{self.role.name}'", "no role")
            return
        if self.role is None:
            raise UnboundPrivilegeMismatch(self.name, self.intent.value, "no role", f"a {expected.value} role")
        if self.role.access is not expected:
            raise UnboundPrivilegeMismatch(
                self.name,
                self.intent.value,
                f"{self.role.access.value} role '{self.role.name}'",
                f"a {expected.value} role",
            )

    @property
    def identity(self) -> AccessRole:
        """The role the function runs as, falling back to the minimal default identity."""
        return self.role if self.role is not None else DEFAULT_EXECUTION_IDENTITY

    @property
    def handler_module(self) -> str:
        return self.handler.rsplit(".", 1)[0]

    @property
    def handler_function(self) -> str:
        return self.handler.rsplit(".", 1)[1]
