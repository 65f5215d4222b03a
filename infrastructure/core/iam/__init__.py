"""Access roles and IAM helper utilities for Lambda workload families."""

from . import utils  # noqa: F401
from .role_catalog import DEFAULT_EXECUTION_IDENTITY, AccessLevel, AccessRole, RoleCatalog

__all__ = ["utils", "AccessLevel", "AccessRole", "RoleCatalog", "DEFAULT_EXECUTION_IDENTITY"]
