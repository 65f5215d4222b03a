"""Relay Amplify build status notifications from SNS to a Slack incoming webhook."""

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger()
logger.setLevel(logging.INFO)

WEBHOOK_TIMEOUT_SECONDS = 2

_STATUS_PATTERN = re.compile(r"build status is (\w+)", re.IGNORECASE)
_STATUS_EMOJI = {
    "STARTED": ":hammer_and_wrench:",
    "SUCCEED": ":white_check_mark:",
    "FAILED": ":x:",
}


def _build_status(message: str) -> Optional[str]:
    match = _STATUS_PATTERN.search(message)
    return match.group(1).upper().rstrip(".") if match else None


def format_message(message: str) -> str:
    """Prefix the Amplify notification text with an emoji for its build status."""
    text = message.strip().strip('"')
    status = _build_status(text)
    emoji = _STATUS_EMOJI.get(status or "", ":grey_question:")
    return f"{emoji} {text}"


def _sns_messages(event: Dict[str, Any]) -> List[str]:
    return [str(record["Sns"]["Message"]) for record in event.get("Records", []) if "Sns" in record]


def main(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    webhook_url = os.environ["SLACK_WEBHOOK_URL"]

    messages = _sns_messages(event)
    for message in messages:
        payload = {"text": format_message(message)}
        response = requests.post(
            webhook_url,
            data=json.dumps(payload),
            headers={"Content-Type": "application/json"},
            timeout=WEBHOOK_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        logger.info("Forwarded build status to Slack: %s", _build_status(message) or "unknown")

    return {"statusCode": 200, "forwarded": len(messages)}
