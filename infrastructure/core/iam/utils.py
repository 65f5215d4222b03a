"""Reusable IAM helper utilities for role definitions."""

from __future__ import annotations

from typing import Iterable, Optional

AWS_MANAGED_POLICY_PREFIX = "arn:aws:iam::aws:policy/"


def dedupe(values: Iterable[str]) -> list[str]:
    """Return items without duplicates while preserving order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        text = str(value or "").strip()
        if not text or text in seen:
            continue
        seen.add(text)
        result.append(text)
    return result


def first_duplicate(values: Iterable[str]) -> Optional[str]:
    """Return the first value that appears twice, or None."""
    seen: set[str] = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return None


def managed_policy_arn(policy_name: str) -> str:
    """Return the ARN of an AWS managed policy, e.g. ``service-role/AWSLambdaBasicExecutionRole``."""
    name = str(policy_name or "").strip().lstrip("/")
    if not name:
        raise ValueError("Managed policy name must be provided")
    if name.startswith("arn:"):
        return name
    return f"{AWS_MANAGED_POLICY_PREFIX}{name}"


def managed_policy_name(policy_arn: str) -> str:
    """Inverse of :func:`managed_policy_arn` for AWS managed policies."""
    if policy_arn.startswith(AWS_MANAGED_POLICY_PREFIX):
        return policy_arn[len(AWS_MANAGED_POLICY_PREFIX) :]
    return policy_arn


def service_role_path(principal: str) -> str:
    """Namespacing path used for service roles (``/service-role/<principal>/``)."""
    service = str(principal or "").strip().strip("/")
    if not service:
        raise ValueError("Principal must be provided")
    return f"/service-role/{service}/"
