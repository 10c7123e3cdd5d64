"""
External webhook client for recipe extraction.

The webhook downloads the video, runs the AI extraction and writes the
recipe to the shared database. It answers in one of two shapes:

- a list of processing results ``[{id, status, title, processed_at}]``
  where ``id`` references a recipe the webhook already stored
- an object ``{success, data, error}`` carrying the full recipe, which the
  caller is expected to store
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
from pydantic import ValidationError

from app.core.config import Settings, get_settings
from app.domain.exceptions import (
    InvalidRecipeUrlError,
    UnsupportedPlatformError,
    WebhookNetworkError,
    WebhookResponseFormatError,
    WebhookServiceError,
)
from app.domain.models import ExtractedRecipeData, WebhookRecipeSummary, WebhookResult
from app.services import platform_service

logger = logging.getLogger(__name__)

PROCESSING_MESSAGE = "Video is being processed. Please check back later."

# Fields the object-shaped response must carry
REQUIRED_RECIPE_FIELDS = [
    "recipe_title",
    "description",
    "prep_time",
    "cook_time",
    "total_time",
    "servings",
]

LIST_ITEM_FIELDS = ("id", "status", "title", "processed_at")


class WebhookRecipeService:
    """Client for the social-media recipe extraction webhook"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings or get_settings()
        self.transport = transport

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.settings.RECIPE_WEBHOOK_USER_AGENT,
        }

    async def process_video_recipe(
        self,
        content_url: str,
        user_id: str,
        recipe_name: Optional[str] = None
    ) -> WebhookResult:
        """
        Send a video URL to the webhook and normalize its answer.

        Args:
            content_url: Social media video URL
            user_id: Owner of the capture, forwarded so the webhook can attribute the recipe
            recipe_name: Optional title hint

        Returns:
            WebhookResult

        Raises:
            InvalidRecipeUrlError: URL is not a well-formed http(s) URL
            UnsupportedPlatformError: URL is not from a supported platform
            WebhookServiceError: Webhook answered with a non-2xx status
            WebhookNetworkError: Webhook could not be reached
            WebhookResponseFormatError: Body matches neither known shape
        """
        validation = platform_service.validate_url(content_url)
        if not validation.is_valid:
            if validation.error == "Invalid URL format":
                raise InvalidRecipeUrlError(content_url)
            raise UnsupportedPlatformError(content_url, validation.error)

        payload: Dict[str, Any] = {"content_url": content_url, "user_id": str(user_id)}
        if recipe_name:
            payload["recipe_name"] = recipe_name

        logger.info(f"Processing video with external webhook: {content_url}")

        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=self.settings.RECIPE_WEBHOOK_TIMEOUT_SECONDS
            ) as client:
                response = await client.post(
                    self.settings.RECIPE_WEBHOOK_URL,
                    json=payload,
                    headers=self._get_headers()
                )
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as e:
            logger.error(f"Webhook unreachable: {e}")
            raise WebhookNetworkError() from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.error(f"Webhook API error: {response.status_code} - {response.text}")
            raise WebhookServiceError(response.status_code, response.text)

        response_text = response.text
        logger.debug(f"Webhook response received: {response_text}")

        if not response_text.strip():
            logger.warning("Empty response from webhook API")
            return WebhookResult(success=False, status="processing", message=PROCESSING_MESSAGE)

        try:
            response_data = json.loads(response_text)
        except json.JSONDecodeError as e:
            raise WebhookResponseFormatError(f"Invalid data format: {e}") from e

        return parse_webhook_response(response_data)


def parse_webhook_response(response_data: Any) -> WebhookResult:
    """Normalize either webhook response shape into a WebhookResult"""
    if isinstance(response_data, list):
        return _parse_list_response(response_data)
    if isinstance(response_data, dict) and "success" in response_data:
        return _parse_object_response(response_data)

    raise WebhookResponseFormatError(
        "Invalid data format: expected a list of results or an object with 'success'"
    )


def _parse_list_response(items: List[Any]) -> WebhookResult:
    if not items:
        raise WebhookResponseFormatError("No processing result received")

    for item in items:
        _validate_list_item(item)

    result = items[0]
    status = str(result["status"])
    title = str(result["title"])

    logger.info(f"Webhook processing completed: {status} - {title}")

    summary = None
    if status == "completed":
        summary = WebhookRecipeSummary(
            recipe_id=str(result["id"]),
            recipe_title=title,
            processed_at=str(result["processed_at"]),
            status=status
        )

    return WebhookResult(
        success=status == "completed",
        status=status,
        message=title,
        processing_result=True,
        summary=summary
    )


def _validate_list_item(item: Any) -> None:
    if not isinstance(item, dict):
        raise WebhookResponseFormatError("Invalid data format: result item is not an object")

    missing = [field for field in LIST_ITEM_FIELDS if field not in item]
    if missing:
        raise WebhookResponseFormatError(f"Invalid data format: missing {', '.join(missing)}")

    for field in LIST_ITEM_FIELDS:
        if not isinstance(item[field], str):
            raise WebhookResponseFormatError(f"Invalid data format: '{field}' must be a string")

    try:
        UUID(item["id"])
    except ValueError as e:
        raise WebhookResponseFormatError("Invalid data format: 'id' is not a UUID") from e


def _parse_object_response(body: Dict[str, Any]) -> WebhookResult:
    if not body.get("success"):
        return WebhookResult(
            success=False,
            status="error",
            message=body.get("error") or "API processing failed"
        )

    data = body.get("data")
    if not isinstance(data, dict):
        data = {}

    missing = [field for field in REQUIRED_RECIPE_FIELDS if field not in data]
    if missing:
        return WebhookResult(
            success=False,
            status="error",
            message=f"Missing required fields: {', '.join(missing)}"
        )

    recipe_fields = {key: value for key, value in data.items() if value is not None}
    recipe_fields.setdefault("processed_at", datetime.now(timezone.utc).isoformat())

    try:
        recipe = ExtractedRecipeData(**recipe_fields)
    except ValidationError as e:
        raise WebhookResponseFormatError(f"Invalid data format: {e}") from e

    return WebhookResult(
        success=True,
        status="completed",
        message=recipe.recipe_title,
        recipe=recipe
    )
