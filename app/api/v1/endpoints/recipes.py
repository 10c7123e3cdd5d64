"""
Recipe endpoints: library, roulette and capture from social media URLs
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from fastapi.responses import JSONResponse
from supabase import Client
from typing import List, Optional
import logging

from app.core.database import get_supabase_admin_client
from app.core.security import get_current_user
from app.domain.enums import DifficultyLevel, MealType
from app.domain.exceptions import (
    ContentNotFoundError,
    RecipeAccessDeniedError,
    RecipeNotFoundError,
)
from app.domain.models import RecipeFilters
from app.services import platform_service
from app.services.recipe_capture_service import RecipeCaptureService, UNEXPECTED_ERROR_MESSAGE
from app.services.recipe_service import RecipeService
from app.services.roulette_service import RouletteService
from app.services.user_service import UserService
from app.services.webhook_service import WebhookRecipeService
from app.api.v1.schemas.capture import CaptureRequest, CaptureStatusResponse
from app.api.v1.schemas.common import MessageResponse
from app.api.v1.schemas.recipe import (
    PlatformsResponse,
    RecipeCreateRequest,
    RecipeDetailResponse,
    RecipeResponse,
    RecipeUpdateRequest,
    RouletteRecipeResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recipes", tags=["Recipes"])


def get_recipe_filters(
    cuisine_type: Optional[str] = Query(None, alias="cuisineType"),
    difficulty_level: Optional[DifficultyLevel] = Query(None, alias="difficultyLevel"),
    meal_type: Optional[MealType] = Query(None, alias="mealType"),
    max_prep_time: Optional[int] = Query(None, alias="maxPrepTime", ge=0),
    max_cook_time: Optional[int] = Query(None, alias="maxCookTime", ge=0),
    dietary_tags: Optional[List[str]] = Query(None, alias="dietaryTags"),
) -> RecipeFilters:
    """Library and roulette filters from query parameters. Tags may be repeated or comma separated."""
    tags = []
    for value in dietary_tags or []:
        tags.extend(tag.strip() for tag in value.split(",") if tag.strip())

    return RecipeFilters(
        cuisine_type=cuisine_type or None,
        difficulty_level=difficulty_level,
        meal_type=meal_type,
        max_prep_time=max_prep_time,
        max_cook_time=max_cook_time,
        dietary_tags=tags,
    )


def get_webhook_service() -> WebhookRecipeService:
    return WebhookRecipeService()


@router.get("", response_model=List[RecipeResponse])
async def list_recipes(
    filters: RecipeFilters = Depends(get_recipe_filters),
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """
    List the caller's recipes, newest first.

    Supports:
    - **cuisineType**: Exact cuisine
    - **difficultyLevel**: easy, medium or hard
    - **mealType**: breakfast, lunch, dinner, snack or dessert
    - **maxPrepTime** / **maxCookTime**: Upper bounds in minutes
    - **dietaryTags**: Recipes with any of these tags
    """
    try:
        recipes = await RecipeService(supabase).list_user_recipes(current_user["id"], filters)
        return [RecipeResponse(**recipe) for recipe in recipes]
    except Exception as e:
        logger.error(f"Error fetching extracted recipes: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch recipes"
        )


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe_data: RecipeCreateRequest,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Create a recipe manually"""
    try:
        await UserService(supabase).get_or_create_profile(current_user)
        data = recipe_data.model_dump()
        if recipe_data.difficulty:
            data["difficulty"] = recipe_data.difficulty.value
        recipe = await RecipeService(supabase).create_manual_recipe(current_user["id"], data)
        return RecipeResponse(**recipe)
    except Exception as e:
        logger.error(f"Error creating recipe: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create recipe"
        )


@router.get("/random", response_model=RouletteRecipeResponse)
async def spin_roulette(
    filters: RecipeFilters = Depends(get_recipe_filters),
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Pick a random recipe from the caller's library, honoring the same filters as the list"""
    try:
        recipe = await RouletteService(supabase).spin(current_user["id"], filters)
    except Exception as e:
        logger.error(f"Error spinning roulette: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get random recipe"
        )

    if not recipe:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No recipes found matching your criteria"
        )

    return RouletteRecipeResponse(**recipe)


@router.get("/platforms", response_model=PlatformsResponse)
async def get_platforms():
    """Supported capture platforms with extraction hints"""
    hinted = ["tiktok", "instagram", "youtube", "pinterest"]
    return PlatformsResponse(
        platforms=platform_service.get_supported_platforms(),
        hints={platform: platform_service.get_extraction_hints(platform) for platform in hinted}
    )


@router.post("/capture")
async def capture_recipe(
    request: CaptureRequest,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client),
    webhook: WebhookRecipeService = Depends(get_webhook_service)
):
    """
    Capture a recipe from a social media video.

    The URL is sent to the extraction webhook, which can take up to two
    minutes. The response always carries **success**; failures add
    **error**, a webhook rate limit answers 429 and an unreachable
    webhook 503. A 202 means the outcome is unknown and the library
    should be refreshed.
    """
    service = RecipeCaptureService(supabase, webhook=webhook)
    try:
        await UserService(supabase).get_or_create_profile(current_user)
        outcome = await service.capture(current_user["id"], request.url, request.recipe_name)
    except Exception as e:
        logger.error(f"Recipe capture error: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": UNEXPECTED_ERROR_MESSAGE}
        )

    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.get("/capture/{content_id}", response_model=CaptureStatusResponse)
async def get_capture_status(
    content_id: str,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Poll the processing status of a submitted URL"""
    try:
        result = await RecipeCaptureService(supabase, webhook=None).get_capture_status(
            current_user["id"], content_id
        )
        return CaptureStatusResponse(**result)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except RecipeAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching capture status: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch capture status"
        )


@router.get("/{recipe_id}", response_model=RecipeDetailResponse)
async def get_recipe(
    recipe_id: str,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Get a recipe with the metadata of the post it came from"""
    try:
        recipe = await RecipeService(supabase).get_recipe_details(current_user["id"], recipe_id)
        return RecipeDetailResponse(**recipe)
    except RecipeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except RecipeAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching recipe details: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch recipe details"
        )


@router.patch("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    updates: RecipeUpdateRequest,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Update a recipe (owner only)"""
    data = updates.model_dump(exclude_unset=True)
    if updates.difficulty:
        data["difficulty"] = updates.difficulty.value

    try:
        recipe = await RecipeService(supabase).update_recipe(current_user["id"], recipe_id, data)
        return RecipeResponse(**recipe)
    except RecipeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except RecipeAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except Exception as e:
        logger.error(f"Error updating recipe: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update recipe"
        )


@router.delete("/{recipe_id}", response_model=MessageResponse)
async def delete_recipe(
    recipe_id: str,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Delete a recipe (owner only)"""
    try:
        await RecipeService(supabase).delete_recipe(current_user["id"], recipe_id)
        return MessageResponse(message="Recipe deleted successfully")
    except RecipeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except RecipeAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except Exception as e:
        logger.error(f"Error deleting recipe: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete recipe"
        )
