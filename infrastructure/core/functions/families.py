"""Workload families and the builder that turns one into roles plus functions.

A family is a group of functions sharing a data domain. Each function declares an
operation intent; the builder binds the least role that intent needs:

- retrieve -> the family's read-only role
- create / update / delete -> the family's read-write role
- transform / import / export / notify / validate -> no role

Roles are created only when at least one function references them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from infrastructure.config.settings import DeploymentSettings
from infrastructure.core.errors import InvalidFunctionDescriptor
from infrastructure.core.functions.descriptor import FunctionDescriptor, LogRetention, OperationIntent
from infrastructure.core.iam.role_catalog import DYNAMODB, S3, AccessLevel, AccessRole, DataStore, RoleCatalog
from infrastructure.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OperationSpec:
    """Static declaration of one function inside a family."""

    name: str
    code_path: str
    intent: OperationIntent
    memory_size: int
    timeout_seconds: int
    description: str = ""
    log_retention: LogRetention = LogRetention.ONE_MONTH
    handler: str = "index.handler"
    uses_family_environment: bool = True
    required_settings: tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkloadFamily:
    name: str
    operations: tuple[OperationSpec, ...]
    store: Optional[DataStore] = None

    def __post_init__(self) -> None:
        if self.store is None:
            for op in self.operations:
                if op.intent.required_access is not None:
                    raise InvalidFunctionDescriptor(
                        op.name, f"intent '{op.intent.value}' needs a data store but family '{self.name}' has none"
                    )


@dataclass(frozen=True)
class FunctionGroup:
    family: str
    roles: tuple[AccessRole, ...]
    functions: tuple[FunctionDescriptor, ...]

    def function(self, name: str) -> FunctionDescriptor:
        for descriptor in self.functions:
            if descriptor.name == name:
                return descriptor
        raise KeyError(f"Function '{name}' not in family '{self.family}'")

    def functions_bound_to(self, role: AccessRole) -> tuple[FunctionDescriptor, ...]:
        return tuple(descriptor for descriptor in self.functions if descriptor.role is role)


def build_function_group(
    family: WorkloadFamily,
    settings: DeploymentSettings,
    environment: Optional[Mapping[str, str]] = None,
    *,
    catalog: Optional[RoleCatalog] = None,
) -> FunctionGroup:
    """Build the roles and function descriptors for ``family``.

    ``environment`` is the family-wide variable mapping; functions that declare
    ``required_settings`` additionally receive those values from ``settings``.
    Pass a shared ``catalog`` to enforce role-name uniqueness across families.
    """
    catalog = catalog if catalog is not None else RoleCatalog()
    family_env = dict(environment or {})

    # Resolve every environment before any role is registered.
    resolved_env: list[dict[str, str]] = []
    for op in family.operations:
        env = dict(family_env) if op.uses_family_environment else {}
        env.update(settings.require(op.name, *op.required_settings))
        resolved_env.append(env)

    roles: dict[AccessLevel, AccessRole] = {}
    functions: list[FunctionDescriptor] = []
    for op, env in zip(family.operations, resolved_env):
        level = op.intent.required_access
        role: Optional[AccessRole] = None
        if level is not None:
            if level not in roles:
                if family.store is None:
                    raise InvalidFunctionDescriptor(op.name, f"family '{family.name}' has no data store")
                roles[level] = catalog.data_access_role(family.name, family.store, level)
            role = roles[level]

        descriptor = FunctionDescriptor(
            name=op.name,
            code_path=op.code_path,
            handler=op.handler,
            intent=op.intent,
            memory_size=op.memory_size,
            timeout_seconds=op.timeout_seconds,
            log_retention=op.log_retention,
            description=op.description,
            role=role,
            environment=env,
        )
        logger.debug(
            "Built function descriptor",
            extra={"function": descriptor.name, "identity": descriptor.identity.name},
        )
        functions.append(descriptor)

    group = FunctionGroup(family=family.name, roles=tuple(roles.values()), functions=tuple(functions))
    logger.info(
        "Built function group",
        extra={"family": family.name, "roles": len(group.roles), "functions": len(group.functions)},
    )
    return group


GOOGLE_API_SERVICE_ACCOUNT_INFO = "GOOGLE_API_SERVICE_ACCOUNT_INFO"

COURSE_REVIEWS = WorkloadFamily(
    name="course-reviews",
    store=DYNAMODB,
    operations=(
        OperationSpec(
            name="get-course-reviews",
            code_path="src/lambda/get-reviews",
            intent=OperationIntent.RETRIEVE,
            memory_size=128,
            timeout_seconds=3,
            description="Get course reviews from the database.",
        ),
        OperationSpec(
            name="post-course-review",
            code_path="src/lambda/post-review",
            intent=OperationIntent.CREATE,
            memory_size=128,
            timeout_seconds=5,
            description="Save course reviews into the database.",
            required_settings=(GOOGLE_API_SERVICE_ACCOUNT_INFO,),
        ),
        OperationSpec(
            name="patch-course-review",
            code_path="src/lambda/patch-review",
            intent=OperationIntent.UPDATE,
            memory_size=128,
            timeout_seconds=5,
            description="Update course reviews in the database.",
            required_settings=(GOOGLE_API_SERVICE_ACCOUNT_INFO,),
        ),
        OperationSpec(
            name="delete-course-review",
            code_path="src/lambda/delete-review",
            intent=OperationIntent.DELETE,
            memory_size=128,
            timeout_seconds=3,
            description="Delete course reviews in the database.",
        ),
    ),
)

TIMETABLE = WorkloadFamily(
    name="timetable",
    store=DYNAMODB,
    operations=(
        OperationSpec(
            name="get-timetable",
            code_path="src/lambda/get-timetable",
            intent=OperationIntent.RETRIEVE,
            memory_size=128,
            timeout_seconds=3,
            description="Get timetable from the database.",
        ),
        OperationSpec(
            name="post-timetable",
            code_path="src/lambda/post-timetable",
            intent=OperationIntent.CREATE,
            memory_size=128,
            timeout_seconds=3,
            description="Save timetable into the database.",
        ),
        OperationSpec(
            name="patch-timetable",
            code_path="src/lambda/patch-timetable",
            intent=OperationIntent.UPDATE,
            memory_size=128,
            timeout_seconds=3,
            description="Update timetable in the database.",
        ),
        OperationSpec(
            name="delete-timetable",
            code_path="src/lambda/delete-timetable",
            intent=OperationIntent.DELETE,
            memory_size=128,
            timeout_seconds=3,
            description="Delete timetable in the database.",
        ),
        # Import/export only parse and render documents; they never touch the table.
        OperationSpec(
            name="import-timetable",
            code_path="src/lambda/import-timetable",
            intent=OperationIntent.IMPORT,
            memory_size=256,
            timeout_seconds=5,
            description="Import timetable from pdf.",
            uses_family_environment=False,
        ),
        OperationSpec(
            name="export-timetable",
            code_path="src/lambda/export-timetable",
            intent=OperationIntent.EXPORT,
            memory_size=512,
            timeout_seconds=5,
            description="Export timetable as image.",
            uses_family_environment=False,
        ),
    ),
)

SYLLABUS = WorkloadFamily(
    name="syllabus",
    store=DYNAMODB,
    operations=(
        OperationSpec(
            name="get-courses",
            code_path="src/lambda/get-courses",
            intent=OperationIntent.RETRIEVE,
            memory_size=128,
            timeout_seconds=3,
            description="Filter courses in the syllabus.",
        ),
    ),
)

SYLLABUS_SCRAPER = WorkloadFamily(
    name="syllabus-scraper",
    store=S3,
    operations=(
        OperationSpec(
            name="syllabus-scraper",
            code_path="src/lambda/syllabus-scraper",
            intent=OperationIntent.CREATE,
            memory_size=4096,
            timeout_seconds=210,
            description="Base function for scraping syllabus data from Waseda University.",
            log_retention=LogRetention.SIX_MONTHS,
        ),
    ),
)

SIGNUP_VALIDATOR = WorkloadFamily(
    name="signup-validator",
    operations=(
        OperationSpec(
            name="wasedamail-signup-validator",
            code_path="src/lambda/signup-validator",
            intent=OperationIntent.VALIDATE,
            memory_size=128,
            timeout_seconds=3,
            description="Validates if the user is signing up using WasedaMail",
            log_retention=LogRetention.SIX_MONTHS,
            uses_family_environment=False,
        ),
    ),
)

WORKLOAD_FAMILIES: tuple[WorkloadFamily, ...] = (
    COURSE_REVIEWS,
    SYLLABUS_SCRAPER,
    SIGNUP_VALIDATOR,
    TIMETABLE,
    SYLLABUS,
)
