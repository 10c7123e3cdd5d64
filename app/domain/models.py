"""
Core domain models
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from app.domain.enums import DifficultyLevel, MealType


# ============= Webhook Models =============

class WebhookRecipeSummary(BaseModel):
    """
    Completed extraction reported by the webhook as a list item.
    The webhook has already written the recipe, only its ID is returned.
    """
    recipe_id: str
    recipe_title: str
    processed_at: str
    status: str


class ExtractedRecipeData(BaseModel):
    """Full recipe payload returned by the webhook as an object"""
    recipe_title: str
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: int = 0
    cook_time: int = 0
    total_time: int = 0
    servings: int = 1
    difficulty_level: str = "medium"
    cuisine_type: str = "international"
    meal_type: str = "main"
    dietary_tags: List[str] = Field(default_factory=list)
    ai_confidence_score: float = 0.5
    processed_at: str

    @field_validator("prep_time", "cook_time", "total_time", mode="before")
    @classmethod
    def default_zero(cls, v):
        return v or 0

    @field_validator("servings", mode="before")
    @classmethod
    def default_one(cls, v):
        return v or 1

    @field_validator("ai_confidence_score", mode="before")
    @classmethod
    def default_confidence(cls, v):
        return v or 0.5


class WebhookResult(BaseModel):
    """Normalized outcome of a webhook call, whichever shape it answered with"""
    success: bool
    status: str
    message: str
    # True when the webhook answered with a list of processing results
    processing_result: bool = False
    summary: Optional[WebhookRecipeSummary] = None
    recipe: Optional[ExtractedRecipeData] = None

    @property
    def is_recipe_available(self) -> bool:
        """The webhook marks videos without a usable recipe by title"""
        if self.status != "completed":
            return False
        title = self.summary.recipe_title if self.summary else (self.recipe.recipe_title if self.recipe else "")
        return title not in UNAVAILABLE_RECIPE_TITLES


UNAVAILABLE_RECIPE_TITLES = ("Recipe Not Available", "Recipe Not Found")


# ============= Query Models =============

class RecipeFilters(BaseModel):
    """Filters shared by the recipe list and the roulette"""
    cuisine_type: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = None
    meal_type: Optional[MealType] = None
    max_prep_time: Optional[int] = Field(None, ge=0)
    max_cook_time: Optional[int] = Field(None, ge=0)
    dietary_tags: List[str] = Field(default_factory=list)
