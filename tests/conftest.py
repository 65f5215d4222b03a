import sys
from pathlib import Path
from typing import Iterator

import pytest


pytest_plugins = [
    "tests.fixtures.deployment",
    "tests.fixtures.cdk",
]

# Ensure project root is on sys.path so 'infrastructure' imports without installation
_repo_root = Path(__file__).resolve().parents[1]
_repo_root_str = str(_repo_root)
if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "infrastructure: marks tests that synthesize CDK stacks")
    config.addinivalue_line("markers", "lambda_handler: marks tests that execute Lambda handlers")


@pytest.fixture(autouse=True)
def deployment_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear named deployment secrets so tests never pick up a developer's shell values.

    Settings are always injected explicitly through the ``settings`` fixture.
    """
    for name in (
        "GOOGLE_API_SERVICE_ACCOUNT_INFO",
        "SLACK_WEBHOOK_URL",
        "GITHUB_OAUTH_TOKEN",
        "WEBSITE_DEV_PASS",
        "DEPLOY_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_REGION", "ap-northeast-1")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-1")
    yield
