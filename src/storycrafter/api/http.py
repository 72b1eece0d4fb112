from __future__ import annotations

import base64
import json
from typing import Any, Dict

from storycrafter.api.models import ValidationError

_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Content-Type": "application/json",
}


class HttpRequestParser:
    """Pulls the JSON object out of an API Gateway proxy event."""

    def parse(self, event: Dict[str, Any]) -> Dict[str, Any]:
        body = event.get("body")
        if body is None or body == "":
            raise ValidationError("Missing request body")

        if event.get("isBase64Encoded"):
            try:
                body = base64.b64decode(body).decode("utf-8")
            except (ValueError, UnicodeDecodeError) as exc:
                raise ValidationError("Body is not valid base64") from exc

        if isinstance(body, str):
            try:
                body = json.loads(body)
            except json.JSONDecodeError as exc:
                raise ValidationError("Body must be valid JSON") from exc

        if not isinstance(body, dict):
            raise ValidationError("Body must be a JSON object")
        return body


def _envelope(status_code: int, body: Dict[str, Any] | None, extra_headers: Dict[str, str] | None = None) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {**_HEADERS, **(extra_headers or {})},
        "body": "" if body is None else json.dumps(body),
    }


def ok(body: Dict[str, Any]) -> Dict[str, Any]:
    return _envelope(200, body)


def failure(status_code: int, message: str) -> Dict[str, Any]:
    return _envelope(status_code, {"ok": False, "error": message})


def preflight() -> Dict[str, Any]:
    return _envelope(204, None, {"Access-Control-Allow-Methods": "POST,OPTIONS"})
