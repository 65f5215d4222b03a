import json
import runpy
from typing import Any, Dict, List

import pytest
import requests


pytestmark = [pytest.mark.unit, pytest.mark.lambda_handler]

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


class FakeResponse:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeWebhook:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, data: str, headers: Dict[str, str], timeout: float) -> FakeResponse:
        self.calls.append({"url": url, "payload": json.loads(data), "headers": headers, "timeout": timeout})
        return FakeResponse(self.status_code)


def _load(monkeypatch: pytest.MonkeyPatch, path: str, status_code: int = 200):
    monkeypatch.setenv("SLACK_WEBHOOK_URL", WEBHOOK)
    webhook = FakeWebhook(status_code)
    monkeypatch.setattr(requests, "post", webhook.post)
    module = runpy.run_path(path)
    return module, webhook


def _sns_event(message: str, subject: str = "") -> Dict[str, Any]:
    return {"Records": [{"EventSource": "aws:sns", "Sns": {"Subject": subject, "Message": message}}]}


def test_amplify_publisher_forwards_build_status(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Given: Amplify 빌드 성공 SNS 알림
    When: 릴레이 핸들러 실행
    Then: 상태 이모지가 붙은 텍스트가 Slack 웹훅으로 1건 전송
    """
    module, webhook = _load(monkeypatch, "src/lambda/functions/amplify_status_publisher/handler.py")
    message = (
        '"Build notification from the AWS Amplify Console for app: https://main.d1.amplifyapp.com/. '
        'Your build status is SUCCEED. Go to https://console.aws.amazon.com/amplify to view details."'
    )

    response = module["main"](_sns_event(message), None)

    assert response == {"statusCode": 200, "forwarded": 1}
    assert len(webhook.calls) == 1
    call = webhook.calls[0]
    assert call["url"] == WEBHOOK
    assert call["payload"]["text"].startswith(":white_check_mark: Build notification")
    assert call["headers"]["Content-Type"] == "application/json"


@pytest.mark.parametrize(
    "message, emoji",
    [
        ("Your build status is FAILED.", ":x:"),
        ("Your build status is STARTED.", ":hammer_and_wrench:"),
        ("Something else entirely", ":grey_question:"),
    ],
)
def test_amplify_message_formatting(monkeypatch: pytest.MonkeyPatch, message: str, emoji: str) -> None:
    module, _ = _load(monkeypatch, "src/lambda/functions/amplify_status_publisher/handler.py")

    assert module["format_message"](message).startswith(emoji)


def test_amplify_publisher_raises_on_webhook_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Given: Slack 웹훅이 500을 반환
    When: 릴레이 핸들러 실행
    Then: 예외가 전파되어 호출이 실패로 처리됨
    """
    module, _ = _load(monkeypatch, "src/lambda/functions/amplify_status_publisher/handler.py", status_code=500)

    with pytest.raises(requests.HTTPError):
        module["main"](_sns_event("Your build status is FAILED."), None)


def test_scraper_publisher_expands_structured_message(monkeypatch: pytest.MonkeyPatch) -> None:
    module, webhook = _load(monkeypatch, "src/lambda/functions/scraper_status_publisher/handler.py")
    message = json.dumps({"status": "SUCCEEDED", "school": "SILS", "execution": "exec-1"})

    response = module["main"](_sns_event(message, subject="Syllabus scraper finished"), None)

    assert response["forwarded"] == 1
    text = webhook.calls[0]["payload"]["text"]
    assert text.splitlines() == [
        "*Syllabus scraper finished*",
        "Status: SUCCEEDED",
        "Execution: exec-1",
        "School: SILS",
    ]


def test_scraper_publisher_forwards_plain_text(monkeypatch: pytest.MonkeyPatch) -> None:
    module, webhook = _load(monkeypatch, "src/lambda/functions/scraper_status_publisher/handler.py")

    module["main"](_sns_event("scraper timed out"), None)

    assert webhook.calls[0]["payload"]["text"] == "*Syllabus scraper*\nscraper timed out"


def test_publishers_ignore_non_sns_records(monkeypatch: pytest.MonkeyPatch) -> None:
    for path in (
        "src/lambda/functions/amplify_status_publisher/handler.py",
        "src/lambda/functions/scraper_status_publisher/handler.py",
    ):
        module, webhook = _load(monkeypatch, path)

        assert module["main"]({"Records": [{"EventSource": "aws:sqs"}]}, None)["forwarded"] == 0
        assert webhook.calls == []
