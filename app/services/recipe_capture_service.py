"""
Recipe capture orchestration.

Flow for a submitted video URL:
1. Validate the URL and detect its platform
2. Record a social_media_content row in "processing"
3. Hand the URL to the extraction webhook
4. Resolve the webhook answer into a recipe the user can open
5. Mark the content row completed or errored

Webhook answers that cannot be parsed often still mean the recipe was
written, so the user's newest recipe is checked before reporting failure.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional
from supabase import Client
import logging

from app.domain.enums import ContentStatus, RecipeStatus
from app.domain.exceptions import (
    ContentNotFoundError,
    RecipeAccessDeniedError,
    WebhookNetworkError,
    WebhookResponseFormatError,
    WebhookServiceError,
)
from app.domain.models import WebhookResult
from app.repositories.extracted_recipe_repository import ExtractedRecipeRepository
from app.repositories.social_media_content_repository import SocialMediaContentRepository
from app.services import platform_service
from app.services.recipe_service import RecipeService, to_recipe_view
from app.services.webhook_service import WebhookRecipeService

logger = logging.getLogger(__name__)

# A recipe this recent is assumed to come from the request whose response failed to parse
RECENT_RECIPE_WINDOW = timedelta(minutes=5)

RATE_LIMITED_MESSAGE = "Too many requests. Please wait before trying again."
UNAVAILABLE_MESSAGE = "Video processing service is temporarily unavailable. Please try again later."
UNEXPECTED_FORMAT_MESSAGE = (
    "Video processing completed but response format was unexpected. "
    "Please check your recipes - the video may have been processed successfully."
)
REFRESH_NOTE = "Refresh the page to see if your recipe was added."
PROCESSING_FAILED_ERROR = "Video processing failed"
PROCESSING_FAILED_MESSAGE = (
    "Unable to process this video. The content may be private, unavailable, "
    "or not contain extractable recipe information."
)
UNEXPECTED_ERROR_MESSAGE = "Unable to process video. Please check the URL and try again."


@dataclass
class CaptureOutcome:
    """HTTP status and JSON body for a capture attempt"""
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


def _extracted_message(title: str) -> str:
    return f'Recipe "{title}" has been successfully extracted and added to your collection!'


def _processed_message(title: str) -> str:
    return f'Recipe "{title}" has been successfully processed and added to your collection!'


class RecipeCaptureService:
    """Service that turns a social media URL into a stored recipe"""

    def __init__(
        self,
        supabase: Client,
        webhook: Optional[WebhookRecipeService] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.content_repo = SocialMediaContentRepository(supabase)
        self.recipe_repo = ExtractedRecipeRepository(supabase)
        self.recipe_service = RecipeService(supabase)
        self.webhook = webhook or WebhookRecipeService()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def capture(self, user_id: str, url: str, recipe_name: Optional[str] = None) -> CaptureOutcome:
        """
        Capture a recipe from a social media video URL.

        Args:
            user_id: Authenticated user the recipe is attributed to
            url: Video URL
            recipe_name: Optional title hint for the webhook

        Returns:
            CaptureOutcome with the status code and response body
        """
        validation = platform_service.validate_url(url)
        if not validation.is_valid:
            logger.info(f"Rejected capture URL for user {user_id}: {validation.error}")
            return CaptureOutcome(400, {"success": False, "error": validation.error})

        platform = validation.platform
        logger.info(f"Starting video capture for user {user_id}: {url} ({platform})")

        content = await self.content_repo.create({
            "user_id": user_id,
            "original_url": url,
            "platform": platform,
            "content_type": "video",
            "title": recipe_name,
            "status": ContentStatus.PROCESSING.value,
        })
        content_id = content["id"] if content else None

        try:
            result = await self.webhook.process_video_recipe(url, user_id, recipe_name)
            outcome = await self._resolve_result(result, content_id, platform)
        except WebhookServiceError as e:
            await self._mark(content_id, ContentStatus.ERROR)
            if e.is_rate_limited:
                return CaptureOutcome(429, {"success": False, "error": RATE_LIMITED_MESSAGE})
            logger.error(f"Recipe capture failed: {e.message}")
            return CaptureOutcome(500, {"success": False, "error": UNEXPECTED_ERROR_MESSAGE})
        except WebhookNetworkError as e:
            logger.error(f"Recipe capture failed: {e.message}")
            await self._mark(content_id, ContentStatus.ERROR)
            return CaptureOutcome(503, {"success": False, "error": UNAVAILABLE_MESSAGE})
        except WebhookResponseFormatError as e:
            logger.error(f"Response parsing issue, checking if recipe was processed anyway: {e.message}")
            outcome = await self._recover_recent_recipe(user_id, platform)
            await self._mark(content_id, ContentStatus.COMPLETED if outcome.success else ContentStatus.ERROR)
            return self._with_content_id(outcome, content_id)
        except Exception:
            await self._mark(content_id, ContentStatus.ERROR)
            raise

        if outcome.success:
            await self._mark(content_id, ContentStatus.COMPLETED)
        elif result.status != ContentStatus.PROCESSING.value:
            await self._mark(content_id, ContentStatus.ERROR)

        return self._with_content_id(outcome, content_id)

    async def _resolve_result(
        self,
        result: WebhookResult,
        content_id: Optional[str],
        platform: str
    ) -> CaptureOutcome:
        if result.processing_result:
            if result.summary is not None and result.is_recipe_available:
                return await self._outcome_for_stored_recipe(result, platform)
            return CaptureOutcome(200, {
                "success": False,
                "status": result.status,
                "message": result.message,
                "platform": platform,
            })

        if result.recipe is not None:
            if not result.is_recipe_available:
                return CaptureOutcome(200, {
                    "success": False,
                    "status": result.status,
                    "message": result.recipe.recipe_title,
                    "platform": platform,
                })
            return await self._persist_recipe(result, content_id, platform)

        return CaptureOutcome(200, {
            "success": False,
            "status": result.status,
            "message": result.message or PROCESSING_FAILED_MESSAGE,
            "error": PROCESSING_FAILED_ERROR,
        })

    async def _outcome_for_stored_recipe(self, result: WebhookResult, platform: str) -> CaptureOutcome:
        """The webhook already stored the recipe, fetch it by ID"""
        summary = result.summary
        summary_data = {
            "recipeId": summary.recipe_id,
            "status": summary.status,
            "processedAt": summary.processed_at,
            "platform": platform,
        }

        try:
            recipe = await self.recipe_service.get_recipe_by_id(summary.recipe_id)
        except Exception as e:
            logger.error(f"Error fetching recipe details for {summary.recipe_id}: {e}")
            recipe = None

        if recipe:
            logger.info(f"Retrieved full recipe details: {recipe['title']}")
            return CaptureOutcome(200, {
                "success": True,
                "message": _extracted_message(recipe["title"]),
                "data": {**recipe, **summary_data},
            })

        return CaptureOutcome(200, {
            "success": True,
            "message": _processed_message(summary.recipe_title),
            "data": {"title": summary.recipe_title, **summary_data},
        })

    async def _persist_recipe(
        self,
        result: WebhookResult,
        content_id: Optional[str],
        platform: str
    ) -> CaptureOutcome:
        """The webhook returned the full recipe, store it against the content row"""
        data = result.recipe
        row = await self.recipe_repo.create({
            "social_media_content_id": content_id,
            "recipe_title": data.recipe_title,
            "description": data.description,
            "ingredients": data.ingredients or [],
            "instructions": data.instructions or [],
            "prep_time": data.prep_time,
            "cook_time": data.cook_time,
            "total_time": data.total_time,
            "servings": data.servings,
            "difficulty_level": data.difficulty_level,
            "cuisine_type": data.cuisine_type,
            "meal_type": data.meal_type,
            "dietary_tags": data.dietary_tags or [],
            "ai_confidence_score": data.ai_confidence_score,
            "status": RecipeStatus.PUBLISHED.value,
        })
        if not row:
            raise RuntimeError("Failed to store extracted recipe")

        content = await self.content_repo.get_by_id(content_id) if content_id else None
        view = to_recipe_view(row, content or {"platform": platform})
        logger.info(f"Stored extracted recipe {row['id']}: {data.recipe_title}")

        return CaptureOutcome(200, {
            "success": True,
            "message": _extracted_message(data.recipe_title),
            "data": {
                **view,
                "recipeId": row["id"],
                "status": ContentStatus.COMPLETED.value,
                "processedAt": data.processed_at,
                "platform": platform,
            },
        })

    async def _recover_recent_recipe(self, user_id: str, platform: str) -> CaptureOutcome:
        try:
            latest = await self.recipe_service.get_latest_recipe(user_id)
        except Exception as e:
            logger.error(f"Error checking for recent recipes: {e}")
            latest = None

        if latest and latest.get("createdAt"):
            created_at = datetime.fromisoformat(str(latest["createdAt"]).replace("Z", "+00:00"))
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)

            if self.clock() - created_at < RECENT_RECIPE_WINDOW:
                logger.info("Found recently processed recipe despite parsing error")
                return CaptureOutcome(200, {
                    "success": True,
                    "message": _extracted_message(latest["title"]),
                    "data": {**latest, "platform": platform},
                })

        return CaptureOutcome(202, {
            "success": False,
            "error": UNEXPECTED_FORMAT_MESSAGE,
            "note": REFRESH_NOTE,
        })

    async def _mark(self, content_id: Optional[str], status: ContentStatus) -> None:
        if not content_id:
            return
        await self.content_repo.update_status(content_id, status, self.clock())

    @staticmethod
    def _with_content_id(outcome: CaptureOutcome, content_id: Optional[str]) -> CaptureOutcome:
        if content_id:
            outcome.body["contentId"] = content_id
        return outcome

    async def get_capture_status(self, user_id: str, content_id: str) -> Dict[str, Any]:
        """
        Poll the processing status of a capture.

        Raises:
            ContentNotFoundError: Unknown content ID
            RecipeAccessDeniedError: Content submitted by another user
        """
        content = await self.content_repo.get_by_id(content_id)
        if not content:
            raise ContentNotFoundError(content_id)

        if content.get("user_id") != user_id:
            raise RecipeAccessDeniedError(content_id, "Access denied - you can only check your own captures")

        recipe = await self.recipe_repo.get_by_content_id(content_id)

        return {
            "content_id": content["id"],
            "status": content.get("status"),
            "processed_at": content.get("processed_at"),
            "platform": content.get("platform"),
            "recipe_id": recipe["id"] if recipe else None,
        }
