"""Development environment configuration."""

import os

from infrastructure.config.types import EnvironmentConfig

dev_config: EnvironmentConfig = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-1",
    # Per-branch preview builds behind basic auth
    "build_mode": "development",
    "frontend_branch": "develop",
    "repository_owner_url": "https://github.com/wasedatime",
    "enable_basic_auth": True,
    "basic_auth_username": "wasedatime",
    "table_names": {
        "course_reviews": "course-review-dev",
        "timetable": "timetable-dev",
        "syllabus": "syllabus-dev",
    },
    "syllabus_bucket_name": "wasedatime-syllabus-dev",
    "tags": {
        "Environment": "dev",
        "Project": "WasedaTime",
    },
}
