"""Production environment configuration."""

import os

from infrastructure.config.types import EnvironmentConfig

prod_config: EnvironmentConfig = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-1",
    "build_mode": "production",
    "frontend_branch": "main",
    "repository_owner_url": "https://github.com/wasedatime",
    "enable_basic_auth": False,
    "table_names": {
        "course_reviews": "course-review",
        "timetable": "timetable",
        "syllabus": "syllabus",
    },
    "syllabus_bucket_name": "wasedatime-syllabus",
    "tags": {
        "Environment": "prod",
        "Project": "WasedaTime",
    },
}
