"""Relay syllabus scraper execution status from SNS to a Slack incoming webhook."""

import json
import logging
import os
from typing import Any, Dict, List

import requests

logger = logging.getLogger()
logger.setLevel(logging.INFO)

WEBHOOK_TIMEOUT_SECONDS = 2


def format_message(subject: str, message: str) -> str:
    """Render one scraper status notification as Slack text.

    Structured messages (``{"status": ..., "detail": ...}``) are expanded; anything
    else is forwarded verbatim.
    """
    header = subject or "Syllabus scraper"
    try:
        body = json.loads(message)
    except ValueError:
        return f"*{header}*\n{message}"
    if not isinstance(body, dict):
        return f"*{header}*\n{message}"

    lines = [f"*{header}*", f"Status: {body.get('status', 'UNKNOWN')}"]
    for key in ("execution", "school", "detail"):
        if body.get(key):
            lines.append(f"{key.capitalize()}: {body[key]}")
    return "\n".join(lines)


def _sns_notifications(event: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [record["Sns"] for record in event.get("Records", []) if "Sns" in record]


def main(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    webhook_url = os.environ["SLACK_WEBHOOK_URL"]

    notifications = _sns_notifications(event)
    for notification in notifications:
        text = format_message(str(notification.get("Subject") or ""), str(notification.get("Message", "")))
        response = requests.post(
            webhook_url,
            data=json.dumps({"text": text}),
            headers={"Content-Type": "application/json"},
            timeout=WEBHOOK_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    logger.info("Forwarded %d scraper status notification(s) to Slack", len(notifications))

    return {"statusCode": 200, "forwarded": len(notifications)}
