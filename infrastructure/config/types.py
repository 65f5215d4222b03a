"""Typed configuration contracts for environment-specific settings."""

from __future__ import annotations

from typing import Dict, NotRequired, Required, TypedDict


class TableNamesConfig(TypedDict, total=False):
    """DynamoDB table name per workload family."""

    course_reviews: str
    timetable: str
    syllabus: str


class EnvironmentConfig(TypedDict, total=False):
    """Strongly-typed environment configuration contract."""

    region: Required[str]
    account_id: NotRequired[str | None]

    build_mode: Required[str]
    frontend_branch: NotRequired[str]
    repository_owner_url: NotRequired[str]
    enable_basic_auth: NotRequired[bool]
    basic_auth_username: NotRequired[str]

    table_names: NotRequired[TableNamesConfig]
    syllabus_bucket_name: NotRequired[str]

    tags: NotRequired[Dict[str, str]]
