"""Access roles assumable by Lambda functions and the catalog that builds them.

Every role produced here carries the Lambda basic execution policy. Data-access roles
come in two shapes, read-only and read-write, and are created per workload family so
that one family's write role never reaches another family's data.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence

from infrastructure.core.errors import DuplicatePolicyReference, DuplicateRoleName, EmptyPolicySet
from infrastructure.core.iam import utils as iam_utils

LAMBDA_PRINCIPAL = "lambda.amazonaws.com"
BASELINE_EXECUTION_POLICY = iam_utils.managed_policy_arn("service-role/AWSLambdaBasicExecutionRole")


class AccessLevel(str, enum.Enum):
    """Persistent-store capability granted by a role."""

    BASELINE = "baseline"
    READ_ONLY = "read"
    READ_WRITE = "write"


@dataclass(frozen=True)
class DataStore:
    """A persistent store and its managed read/full-access policies."""

    name: str
    read_policy: str
    full_access_policy: str

    def policy_for(self, level: AccessLevel) -> str:
        if level is AccessLevel.READ_ONLY:
            return self.read_policy
        if level is AccessLevel.READ_WRITE:
            return self.full_access_policy
        raise ValueError(f"No store policy for access level: {level.value}")


DYNAMODB = DataStore(
    name="dynamodb",
    read_policy=iam_utils.managed_policy_arn("AmazonDynamoDBReadOnlyAccess"),
    full_access_policy=iam_utils.managed_policy_arn("AmazonDynamoDBFullAccess"),
)

S3 = DataStore(
    name="s3",
    read_policy=iam_utils.managed_policy_arn("AmazonS3ReadOnlyAccess"),
    full_access_policy=iam_utils.managed_policy_arn("AmazonS3FullAccess"),
)


@dataclass(frozen=True)
class AccessRole:
    """Immutable role definition. Shared by reference between function descriptors."""

    name: str
    principal: str
    policies: tuple[str, ...]
    path: str
    description: str
    access: AccessLevel = AccessLevel.BASELINE


# Identity used by functions that bind no role. The provisioning engine synthesizes it
# per function with nothing beyond the baseline execution policy.
DEFAULT_EXECUTION_IDENTITY = AccessRole(
    name="default-execution-identity",
    principal=LAMBDA_PRINCIPAL,
    policies=(BASELINE_EXECUTION_POLICY,),
    path=iam_utils.service_role_path(LAMBDA_PRINCIPAL),
    description="Minimal default identity (basic execution only)",
)


class RoleCatalog:
    """Builds access roles and enforces deployment-wide name uniqueness."""

    def __init__(self, *, baseline_policy: str = BASELINE_EXECUTION_POLICY) -> None:
        self._baseline_policy = baseline_policy
        self._roles: dict[str, AccessRole] = {}

    @property
    def roles(self) -> tuple[AccessRole, ...]:
        return tuple(self._roles.values())

    def build_role(
        self,
        name: str,
        principal: str,
        policies: Sequence[str],
        purpose: str,
        *,
        access: AccessLevel = AccessLevel.BASELINE,
    ) -> AccessRole:
        """Create a role from an ordered, non-empty set of policy references."""
        role_name = str(name or "").strip()
        if not role_name:
            raise ValueError("Role name must be provided")
        if role_name in self._roles:
            raise DuplicateRoleName(role_name)

        requested = [str(policy).strip() for policy in policies]
        if not requested:
            raise EmptyPolicySet(role_name)
        duplicate = iam_utils.first_duplicate(requested)
        if duplicate is not None:
            raise DuplicatePolicyReference(role_name, duplicate)

        role = AccessRole(
            name=role_name,
            principal=principal,
            policies=tuple(iam_utils.dedupe([self._baseline_policy, *requested])),
            path=iam_utils.service_role_path(principal),
            description=purpose,
            access=access,
        )
        self._roles[role_name] = role
        return role

    def data_access_role(self, family: str, store: DataStore, access: AccessLevel) -> AccessRole:
        """Preset: baseline plus the store's read or full-access policy, scoped to one family."""
        return self.build_role(
            data_access_role_name(family, store, access),
            LAMBDA_PRINCIPAL,
            [store.policy_for(access)],
            f"Allow {family} lambda functions to {'read from' if access is AccessLevel.READ_ONLY else 'write to'} "
            f"{store.name}",
            access=access,
        )

    def read_only_role(self, family: str, store: DataStore = DYNAMODB) -> AccessRole:
        return self.data_access_role(family, store, AccessLevel.READ_ONLY)

    def read_write_role(self, family: str, store: DataStore = DYNAMODB) -> AccessRole:
        return self.data_access_role(family, store, AccessLevel.READ_WRITE)


def data_access_role_name(family: str, store: DataStore, access: AccessLevel) -> str:
    return f"{store.name}-lambda-{access.value}-{family}"
