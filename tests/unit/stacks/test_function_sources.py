from pathlib import Path

import pytest
from aws_cdk import App, Stack
from aws_cdk.assertions import Template

from infrastructure.constructs.lambda_functions import (
    StatusPublisherConstruct,
    handler_path,
    verify_function_sources,
)
from infrastructure.core.description import build_deployment_description
from infrastructure.core.errors import MissingFunctionSource
from infrastructure.core.functions.status_publisher import STATUS_PUBLISHERS, build_status_publisher
from infrastructure.stacks.backend_stack import BackendStack
from tests.fixtures.deployment import SLACK_WEBHOOK


pytestmark = [pytest.mark.unit, pytest.mark.infrastructure]

REPO_ROOT = Path(__file__).resolve().parents[3]

# Skip Docker bundling; PythonFunction still resolves its entry and index file
_NO_BUNDLING = {"aws:cdk:bundling-stacks": []}


def test_backend_stack_rejects_missing_handler_modules(make_config, settings, tmp_path) -> None:
    """
    Given: 핸들러 모듈이 없는 코드 루트
    When: 실제 PythonFunction으로 백엔드 스택 생성
    Then: 구성 요소 생성 전에 MissingFunctionSource 발생
    """
    config = make_config("prod")
    description = build_deployment_description("prod", config, settings)

    with pytest.raises(MissingFunctionSource) as excinfo:
        BackendStack(
            App(context=_NO_BUNDLING),
            "BackendStackMissingSources",
            environment="prod",
            config=config,
            deployment=description,
            code_root=tmp_path,
        )
    assert excinfo.value.function_name == description.functions[0].name
    assert excinfo.value.path == str(handler_path(description.functions[0], tmp_path))


def test_verify_function_sources_reports_first_missing_module(settings, tmp_path) -> None:
    descriptors = [build_status_publisher(publisher, settings) for publisher in STATUS_PUBLISHERS]
    present, missing = descriptors
    module = handler_path(present, tmp_path)
    module.parent.mkdir(parents=True)
    module.write_text("def main(event, context):\n    return {}\n")

    with pytest.raises(MissingFunctionSource) as excinfo:
        verify_function_sources(descriptors, tmp_path)
    assert excinfo.value.function_name == missing.name


def test_status_publisher_sources_ship_with_the_repository(settings) -> None:
    descriptors = [build_status_publisher(publisher, settings) for publisher in STATUS_PUBLISHERS]

    verify_function_sources(descriptors, REPO_ROOT)


@pytest.mark.parametrize("publisher", STATUS_PUBLISHERS, ids=lambda publisher: publisher.name)
def test_status_publisher_bundles_requests(publisher) -> None:
    """
    Given: requests를 사용하는 상태 알림 핸들러
    When: 엔트리 디렉터리의 requirements.txt 확인
    Then: handler.py 옆에 requests 의존성이 선언됨
    """
    entry = REPO_ROOT / publisher.code_path
    requirements = entry / "requirements.txt"

    assert (entry / "handler.py").is_file()
    assert requirements.is_file()
    packages = [line.split(">=")[0].split("==")[0].strip() for line in requirements.read_text().splitlines()]
    assert "requests" in packages


@pytest.mark.parametrize("publisher", STATUS_PUBLISHERS, ids=lambda publisher: publisher.name)
def test_status_publisher_synthesizes_with_python_function(publisher, settings) -> None:
    """
    Given: 저장소에 포함된 상태 알림 핸들러 소스
    When: 실제 PythonFunction으로 릴레이 구성 요소 합성
    Then: 핸들러, 런타임, 웹훅 환경 변수가 템플릿에 반영
    """
    stack = Stack(App(context=_NO_BUNDLING), f"PublisherStack-{publisher.name}")
    StatusPublisherConstruct(
        stack,
        publisher.name,
        descriptor=build_status_publisher(publisher, settings),
        topic_name=f"{publisher.event_source}-test",
        code_root=REPO_ROOT,
    )
    template = Template.from_stack(stack)

    template.has_resource_properties(
        "AWS::Lambda::Function",
        {
            "FunctionName": publisher.name,
            "Handler": "handler.main",
            "Runtime": "python3.12",
            "MemorySize": 128,
            "Timeout": 3,
            "Environment": {"Variables": {"SLACK_WEBHOOK_URL": SLACK_WEBHOOK}},
        },
    )
    template.has_resource_properties("AWS::SNS::Subscription", {"Protocol": "lambda"})
