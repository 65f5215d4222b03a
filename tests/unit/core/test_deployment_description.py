import pytest

from infrastructure.core.build_spec import FRONTEND_APPS, BuildMode
from infrastructure.core.description import build_deployment_description, family_environment
from infrastructure.core.errors import DuplicateFunctionName, MissingRequiredEnvironment
from infrastructure.core.functions import families
from infrastructure.core.functions.descriptor import OperationIntent
from infrastructure.core.functions.families import OperationSpec, WorkloadFamily
from infrastructure.core.iam.role_catalog import BASELINE_EXECUTION_POLICY


pytestmark = [pytest.mark.unit]


def test_dev_description_contents(make_config, settings) -> None:
    """
    Given: dev 환경 설정과 모든 비밀 값
    When: 배포 기술서 생성
    Then: 5개 패밀리, 2개 상태 릴레이, 앱별 development 빌드 스펙 포함
    """
    description = build_deployment_description("dev", make_config("dev"), settings)

    assert [group.family for group in description.groups] == [family.name for family in families.WORKLOAD_FAMILIES]
    assert [descriptor.name for descriptor in description.status_publishers] == [
        "amplify-status-publisher",
        "scraper-status-publisher",
    ]
    assert {spec.app_name for spec in description.build_specs} == set(FRONTEND_APPS)
    assert {spec.mode for spec in description.build_specs} == {BuildMode.DEVELOPMENT}
    assert description.environment == "dev"


def test_roles_are_exactly_those_referenced(make_config, settings) -> None:
    description = build_deployment_description("prod", make_config("prod"), settings)

    referenced = {descriptor.role.name for descriptor in description.functions if descriptor.role is not None}
    assert {role.name for role in description.roles} == referenced
    assert len(description.roles) == len(referenced) == 6
    assert all(BASELINE_EXECUTION_POLICY in role.policies for role in description.roles)


def test_function_names_are_unique(make_config, settings) -> None:
    description = build_deployment_description("prod", make_config("prod"), settings)
    names = [descriptor.name for descriptor in description.functions]

    assert len(names) == len(set(names)) == 15


def test_table_names_flow_into_family_environment(make_config, settings) -> None:
    description = build_deployment_description("prod", make_config("prod"), settings)

    assert description.function("get-course-reviews").environment["TABLE_NAME"] == "course-review"
    assert description.function("get-timetable").environment["TABLE_NAME"] == "timetable"
    assert description.function("get-courses").environment["TABLE_NAME"] == "syllabus"
    assert description.function("syllabus-scraper").environment["SYLLABUS_BUCKET"] == "wasedatime-syllabus"
    assert description.build_spec_for("root").mode is BuildMode.PRODUCTION


def test_family_environment_without_matching_config(make_config) -> None:
    config = make_config("dev", table_names={})
    del config["syllabus_bucket_name"]  # type: ignore[misc]

    assert family_environment("timetable", config) == {}
    assert family_environment("syllabus-scraper", config) == {}


def test_description_is_deterministic(make_config, settings) -> None:
    """
    Given: 동일한 설정 입력
    When: 배포 기술서를 두 번 생성
    Then: 구조적으로 동일한 결과
    """
    first = build_deployment_description("dev", make_config("dev"), settings)
    second = build_deployment_description("dev", make_config("dev"), settings)

    assert first == second


def test_missing_webhook_aborts_description(make_config, make_settings) -> None:
    with pytest.raises(MissingRequiredEnvironment):
        build_deployment_description("dev", make_config("dev"), make_settings(slack_webhook_url=None))


def test_duplicate_function_name_across_families(monkeypatch, make_config, settings) -> None:
    clash = WorkloadFamily(
        name="clash",
        operations=(
            OperationSpec(
                name="export-timetable",
                code_path="src/lambda/clash",
                intent=OperationIntent.EXPORT,
                memory_size=128,
                timeout_seconds=3,
            ),
        ),
    )
    monkeypatch.setattr(
        "infrastructure.core.description.WORKLOAD_FAMILIES",
        families.WORKLOAD_FAMILIES + (clash,),
    )

    with pytest.raises(DuplicateFunctionName) as excinfo:
        build_deployment_description("dev", make_config("dev"), settings)
    assert excinfo.value.function_name == "export-timetable"


def test_lookups_raise_key_error_for_unknown_names(make_config, settings) -> None:
    description = build_deployment_description("dev", make_config("dev"), settings)

    with pytest.raises(KeyError):
        description.function("missing")
    with pytest.raises(KeyError):
        description.group("missing")
    with pytest.raises(KeyError):
        description.build_spec_for("missing")
