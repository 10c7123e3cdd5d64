"""
Tests for recipe capture orchestration
"""
import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from app.core.config import get_settings
from app.domain.exceptions import ContentNotFoundError, RecipeAccessDeniedError
from app.services.recipe_capture_service import RecipeCaptureService
from app.services.webhook_service import WebhookRecipeService
from conftest import OTHER_USER_ID, TEST_USER, add_recipe

USER_ID = TEST_USER["id"]
VIDEO_URL = "https://www.tiktok.com/@chef/video/7234"


def make_service(db, handler, clock=None):
    webhook = WebhookRecipeService(get_settings(), transport=httpx.MockTransport(handler))
    return RecipeCaptureService(db, webhook=webhook, clock=clock)


def capture(db, handler, url=VIDEO_URL, clock=None):
    return asyncio.run(make_service(db, handler, clock).capture(USER_ID, url))


def content_rows(db):
    return db.tables.get("social_media_content", [])


def list_response(recipe_id, title="Crispy Chickpea Tacos", status="completed"):
    def handler(request):
        return httpx.Response(200, json=[{
            "id": recipe_id,
            "status": status,
            "title": title,
            "processed_at": "2026-10-19T10:00:00Z",
        }])
    return handler


def test_invalid_url_returns_400_without_calling_webhook(fake_supabase):
    def handler(request):
        raise AssertionError("webhook should not be called")

    outcome = capture(fake_supabase, handler, url="https://vimeo.com/123")

    assert outcome.status_code == 400
    assert outcome.body["success"] is False
    assert outcome.body["error"].startswith("Unsupported platform")
    assert content_rows(fake_supabase) == []


def test_completed_list_response_returns_full_recipe(fake_supabase):
    # The webhook writes the recipe itself and answers with its ID
    stored = add_recipe(fake_supabase, title="Crispy Chickpea Tacos")

    outcome = capture(fake_supabase, list_response(stored["id"]))

    assert outcome.status_code == 200
    body = outcome.body
    assert body["success"] is True
    assert body["message"] == 'Recipe "Crispy Chickpea Tacos" has been successfully extracted and added to your collection!'
    assert body["data"]["recipeId"] == stored["id"]
    assert body["data"]["ingredients"] == ["pasta", "butter"]
    assert body["data"]["status"] == "completed"
    assert body["data"]["processedAt"] == "2026-10-19T10:00:00Z"
    assert body["data"]["platform"] == "tiktok"

    submitted = content_rows(fake_supabase)[-1]
    assert body["contentId"] == submitted["id"]
    assert submitted["status"] == "completed"
    assert submitted["processed_at"]


def test_completed_list_response_with_unknown_recipe_returns_summary(fake_supabase):
    missing_id = "0e4b9e55-3d0c-4f0c-9a63-1c2d3e4f5a6b"

    outcome = capture(fake_supabase, list_response(missing_id, title="Lemon Orzo"))

    assert outcome.body["success"] is True
    assert outcome.body["message"] == 'Recipe "Lemon Orzo" has been successfully processed and added to your collection!'
    assert outcome.body["data"] == {
        "title": "Lemon Orzo",
        "recipeId": missing_id,
        "status": "completed",
        "processedAt": "2026-10-19T10:00:00Z",
        "platform": "tiktok",
    }


def test_recipe_not_available(fake_supabase):
    outcome = capture(fake_supabase, list_response(
        "0e4b9e55-3d0c-4f0c-9a63-1c2d3e4f5a6b", title="Recipe Not Available"
    ))

    assert outcome.status_code == 200
    assert outcome.body["success"] is False
    assert outcome.body["status"] == "completed"
    assert outcome.body["message"] == "Recipe Not Available"
    assert outcome.body["platform"] == "tiktok"
    assert content_rows(fake_supabase)[-1]["status"] == "error"


def test_object_response_persists_recipe(fake_supabase):
    def handler(request):
        return httpx.Response(200, json={
            "success": True,
            "data": {
                "recipe_title": "Miso Ramen",
                "description": "Rich and quick",
                "ingredients": ["noodles", "miso"],
                "instructions": ["simmer", "serve"],
                "prep_time": 5,
                "cook_time": 20,
                "total_time": 25,
                "servings": 2,
                "cuisine_type": "Japanese",
            },
        })

    outcome = capture(fake_supabase, handler)

    assert outcome.body["success"] is True
    assert outcome.body["data"]["title"] == "Miso Ramen"
    assert outcome.body["data"]["cuisine"] == "Japanese"

    recipes = fake_supabase.tables["extracted_recipes"]
    assert len(recipes) == 1
    assert recipes[0]["status"] == "published"
    assert recipes[0]["social_media_content_id"] == content_rows(fake_supabase)[-1]["id"]
    assert content_rows(fake_supabase)[-1]["status"] == "completed"


def test_object_response_failure(fake_supabase):
    def handler(request):
        return httpx.Response(200, json={"success": False, "error": "Video is private"})

    outcome = capture(fake_supabase, handler)

    assert outcome.status_code == 200
    assert outcome.body["success"] is False
    assert outcome.body["error"] == "Video processing failed"
    assert outcome.body["message"] == "Video is private"
    assert content_rows(fake_supabase)[-1]["status"] == "error"


def test_empty_body_leaves_content_processing(fake_supabase):
    def handler(request):
        return httpx.Response(200, text="")

    outcome = capture(fake_supabase, handler)

    assert outcome.body["success"] is False
    assert outcome.body["message"] == "Video is being processed. Please check back later."
    assert content_rows(fake_supabase)[-1]["status"] == "processing"


def test_rate_limited_webhook_returns_429(fake_supabase):
    def handler(request):
        return httpx.Response(429, text="rate limited")

    outcome = capture(fake_supabase, handler)

    assert outcome.status_code == 429
    assert outcome.body["error"] == "Too many requests. Please wait before trying again."
    assert content_rows(fake_supabase)[-1]["status"] == "error"


def test_other_webhook_error_returns_500(fake_supabase):
    def handler(request):
        return httpx.Response(502, text="bad gateway")

    outcome = capture(fake_supabase, handler)

    assert outcome.status_code == 500
    assert outcome.body["error"] == "Unable to process video. Please check the URL and try again."


def test_unreachable_webhook_returns_503(fake_supabase):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    outcome = capture(fake_supabase, handler)

    assert outcome.status_code == 503
    assert outcome.body["error"] == "Video processing service is temporarily unavailable. Please try again later."


def test_unparseable_response_recovers_recent_recipe(fake_supabase):
    add_recipe(fake_supabase, title="Brown Butter Gnocchi")

    def handler(request):
        return httpx.Response(200, text="not json")

    outcome = capture(fake_supabase, handler)

    assert outcome.status_code == 200
    assert outcome.body["success"] is True
    assert outcome.body["data"]["title"] == "Brown Butter Gnocchi"
    assert outcome.body["data"]["platform"] == "tiktok"


def test_unparseable_response_without_recent_recipe_returns_202(fake_supabase):
    add_recipe(fake_supabase, title="Old Recipe")
    later = datetime.now(timezone.utc) + timedelta(minutes=10)

    def handler(request):
        return httpx.Response(200, text="not json")

    outcome = capture(fake_supabase, handler, clock=lambda: later)

    assert outcome.status_code == 202
    assert outcome.body["success"] is False
    assert outcome.body["note"] == "Refresh the page to see if your recipe was added."


def test_capture_status(fake_supabase):
    stored = add_recipe(fake_supabase)
    content_id = stored["social_media_content_id"]
    service = make_service(fake_supabase, lambda request: httpx.Response(200, text=""))

    status = asyncio.run(service.get_capture_status(USER_ID, content_id))

    assert status["content_id"] == content_id
    assert status["status"] == "completed"
    assert status["platform"] == "tiktok"
    assert status["recipe_id"] == stored["id"]


def test_capture_status_unknown_and_foreign_content(fake_supabase):
    foreign = add_recipe(fake_supabase, user_id=OTHER_USER_ID)
    service = make_service(fake_supabase, lambda request: httpx.Response(200, text=""))

    with pytest.raises(ContentNotFoundError):
        asyncio.run(service.get_capture_status(USER_ID, "missing"))

    with pytest.raises(RecipeAccessDeniedError):
        asyncio.run(service.get_capture_status(USER_ID, foreign["social_media_content_id"]))
