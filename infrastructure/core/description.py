"""Fully resolved deployment description handed to CDK for synthesis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from infrastructure.config.settings import DeploymentSettings
from infrastructure.config.types import EnvironmentConfig
from infrastructure.core.build_spec import FRONTEND_APPS, BuildMode, BuildSpecification, build_spec
from infrastructure.core.errors import DuplicateFunctionName
from infrastructure.core.functions.descriptor import FunctionDescriptor
from infrastructure.core.functions.families import WORKLOAD_FAMILIES, FunctionGroup, build_function_group
from infrastructure.core.functions.status_publisher import STATUS_PUBLISHERS, build_status_publisher
from infrastructure.core.iam import utils as iam_utils
from infrastructure.core.iam.role_catalog import AccessRole, RoleCatalog
from infrastructure.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeploymentDescription:
    environment: str
    roles: tuple[AccessRole, ...]
    groups: tuple[FunctionGroup, ...]
    status_publishers: tuple[FunctionDescriptor, ...]
    build_specs: tuple[BuildSpecification, ...]

    @property
    def functions(self) -> tuple[FunctionDescriptor, ...]:
        grouped = tuple(descriptor for group in self.groups for descriptor in group.functions)
        return grouped + self.status_publishers

    def function(self, name: str) -> FunctionDescriptor:
        for descriptor in self.functions:
            if descriptor.name == name:
                return descriptor
        raise KeyError(f"Function not in deployment: {name}")

    def group(self, family: str) -> FunctionGroup:
        for group in self.groups:
            if group.family == family:
                return group
        raise KeyError(f"Workload family not in deployment: {family}")

    def build_spec_for(self, app_name: str) -> BuildSpecification:
        for spec in self.build_specs:
            if spec.app_name == app_name:
                return spec
        raise KeyError(f"Application not in deployment: {app_name}")


def family_environment(family: str, config: EnvironmentConfig) -> dict[str, str]:
    """Family-wide environment variables derived from the environment config."""
    table_names: Mapping[str, str] = config.get("table_names", {}) or {}
    table_key = family.replace("-", "_")
    if table_key in table_names:
        return {"TABLE_NAME": str(table_names[table_key])}  # type: ignore[literal-required]
    if family == "syllabus-scraper" and config.get("syllabus_bucket_name"):
        return {"SYLLABUS_BUCKET": str(config["syllabus_bucket_name"])}
    return {}


def build_deployment_description(
    environment: str,
    config: EnvironmentConfig,
    settings: DeploymentSettings,
) -> DeploymentDescription:
    """Build every role, function and build specification for one environment."""
    catalog = RoleCatalog()
    groups = tuple(
        build_function_group(family, settings, family_environment(family.name, config), catalog=catalog)
        for family in WORKLOAD_FAMILIES
    )
    publishers = tuple(build_status_publisher(publisher, settings) for publisher in STATUS_PUBLISHERS)

    names = [descriptor.name for group in groups for descriptor in group.functions]
    names.extend(descriptor.name for descriptor in publishers)
    duplicate = iam_utils.first_duplicate(names)
    if duplicate is not None:
        raise DuplicateFunctionName(duplicate)

    mode = BuildMode(config["build_mode"])
    specs = tuple(build_spec(app_name, mode) for app_name in FRONTEND_APPS)

    description = DeploymentDescription(
        environment=environment,
        roles=catalog.roles,
        groups=groups,
        status_publishers=publishers,
        build_specs=specs,
    )
    logger.info(
        "Built deployment description",
        extra={
            "target": environment,
            "roles": len(description.roles),
            "functions": len(description.functions),
            "build_specs": len(specs),
            "build_mode": mode.value,
        },
    )
    return description
