"""
Tests for the recipe library service and the roulette
"""
import asyncio
import random

import pytest

from app.domain.enums import DifficultyLevel, MealType
from app.domain.exceptions import RecipeAccessDeniedError, RecipeNotFoundError
from app.domain.models import RecipeFilters
from app.services.recipe_service import RecipeService, to_recipe_view
from app.services.roulette_service import RouletteService
from conftest import OTHER_USER_ID, TEST_USER, add_recipe

USER_ID = TEST_USER["id"]


def run(coro):
    return asyncio.run(coro)


def titles(views):
    return [view["title"] for view in views]


def test_view_defaults():
    view = to_recipe_view({"id": "r1", "recipe_title": "Toast", "prep_time": 2, "cook_time": 3})

    assert view["ingredients"] == []
    assert view["instructions"] == []
    assert view["totalTime"] == 5
    assert view["servings"] == 1
    assert view["difficulty"] == "medium"
    assert view["cuisine"] == "International"
    assert view["category"] == "Main Course"
    assert view["dietaryTags"] == []
    assert view["platform"] == "unknown"
    assert view["username"] == "Unknown Chef"
    assert view["rating"] == 0
    assert view["imageUrl"]


def test_view_username_fallbacks():
    recipe = {"id": "r1", "recipe_title": "Toast"}
    assert to_recipe_view(recipe, {"author_username": "@chef", "author": "Chef"})["username"] == "@chef"
    assert to_recipe_view(recipe, {"author": "Chef", "title": "Video"})["username"] == "Chef"
    assert to_recipe_view(recipe, {"title": "Video"})["username"] == "Video"


def test_list_only_returns_own_published_recipes_newest_first(fake_supabase):
    add_recipe(fake_supabase, title="First")
    add_recipe(fake_supabase, title="Second")
    add_recipe(fake_supabase, title="Draft", status="draft")
    add_recipe(fake_supabase, user_id=OTHER_USER_ID, title="Someone Else's")

    views = run(RecipeService(fake_supabase).list_user_recipes(USER_ID))

    assert titles(views) == ["Second", "First"]


def test_list_removes_duplicate_titles_keeping_newest(fake_supabase):
    add_recipe(fake_supabase, title="Pad Thai", cuisine_type="Thai")
    newest = add_recipe(fake_supabase, title="Pad Thai", cuisine_type="Thai")

    views = run(RecipeService(fake_supabase).list_user_recipes(USER_ID))

    assert len(views) == 1
    assert views[0]["id"] == newest["id"]


def test_list_filters(fake_supabase):
    add_recipe(fake_supabase, title="Quick Salad", difficulty_level="easy", meal_type="lunch",
               prep_time=5, cook_time=0, cuisine_type="Greek", dietary_tags=["vegan"])
    add_recipe(fake_supabase, title="Beef Wellington", difficulty_level="hard", meal_type="dinner",
               prep_time=60, cook_time=90, cuisine_type="British", dietary_tags=[])
    add_recipe(fake_supabase, title="Pancakes", difficulty_level="easy", meal_type="breakfast",
               prep_time=10, cook_time=10, cuisine_type="American", dietary_tags=["vegetarian"])

    service = RecipeService(fake_supabase)

    def listed(**filters):
        return sorted(titles(run(service.list_user_recipes(USER_ID, RecipeFilters(**filters)))))

    assert listed(difficulty_level=DifficultyLevel.EASY) == ["Pancakes", "Quick Salad"]
    assert listed(meal_type=MealType.DINNER) == ["Beef Wellington"]
    assert listed(cuisine_type="Greek") == ["Quick Salad"]
    assert listed(max_prep_time=10) == ["Pancakes", "Quick Salad"]
    assert listed(max_cook_time=30) == ["Pancakes", "Quick Salad"]
    assert listed(dietary_tags=["vegan", "vegetarian"]) == ["Pancakes", "Quick Salad"]
    assert listed(difficulty_level=DifficultyLevel.EASY, max_cook_time=5) == ["Quick Salad"]


def test_recipe_details_include_social_media(fake_supabase):
    stored = add_recipe(fake_supabase, content={"author": "Chef Jo", "author_username": "@chefjo", "views": 1200})

    details = run(RecipeService(fake_supabase).get_recipe_details(USER_ID, stored["id"]))

    assert details["title"] == "Garlic Butter Pasta"
    assert details["username"] == "@chefjo"
    assert details["socialMedia"]["author"] == "Chef Jo"
    assert details["socialMedia"]["views"] == 1200
    assert details["socialMedia"]["platform"] == "tiktok"


def test_recipe_details_missing_and_foreign(fake_supabase):
    foreign = add_recipe(fake_supabase, user_id=OTHER_USER_ID)
    service = RecipeService(fake_supabase)

    with pytest.raises(RecipeNotFoundError):
        run(service.get_recipe_details(USER_ID, "missing"))
    with pytest.raises(RecipeAccessDeniedError):
        run(service.get_recipe_details(USER_ID, foreign["id"]))


def test_update_recipe_maps_fields(fake_supabase):
    stored = add_recipe(fake_supabase)

    view = run(RecipeService(fake_supabase).update_recipe(USER_ID, stored["id"], {
        "title": "Garlic Butter Linguine",
        "difficulty": "medium",
        "cuisine": "Italian-American",
        "servings": 4,
    }))

    assert view["title"] == "Garlic Butter Linguine"
    assert view["difficulty"] == "medium"
    assert view["servings"] == 4
    row = fake_supabase.tables["extracted_recipes"][0]
    assert row["recipe_title"] == "Garlic Butter Linguine"
    assert row["cuisine_type"] == "Italian-American"


def test_update_and_delete_are_owner_only(fake_supabase):
    foreign = add_recipe(fake_supabase, user_id=OTHER_USER_ID)
    service = RecipeService(fake_supabase)

    with pytest.raises(RecipeAccessDeniedError):
        run(service.update_recipe(USER_ID, foreign["id"], {"title": "Mine now"}))
    with pytest.raises(RecipeAccessDeniedError):
        run(service.delete_recipe(USER_ID, foreign["id"]))
    assert len(fake_supabase.tables["extracted_recipes"]) == 1


def test_delete_recipe(fake_supabase):
    stored = add_recipe(fake_supabase)

    assert run(RecipeService(fake_supabase).delete_recipe(USER_ID, stored["id"]))
    assert fake_supabase.tables["extracted_recipes"] == []


def test_create_manual_recipe(fake_supabase):
    service = RecipeService(fake_supabase)

    manual = run(service.create_manual_recipe(USER_ID, {"title": "Grandma's Soup", "ingredients": ["carrots"]}))
    linked = run(service.create_manual_recipe(USER_ID, {
        "title": "Viral Feta Pasta",
        "source_url": "https://www.instagram.com/reel/abc/",
    }))

    assert manual["platform"] == "manual"
    assert manual["ingredients"] == ["carrots"]
    assert linked["platform"] == "instagram"
    assert sorted(titles(run(service.list_user_recipes(USER_ID)))) == ["Grandma's Soup", "Viral Feta Pasta"]


def test_recent_recipes(fake_supabase):
    for title in ["One", "Two", "Three"]:
        add_recipe(fake_supabase, title=title)

    recent = run(RecipeService(fake_supabase).get_recent_recipes(USER_ID, limit=2))

    assert titles(recent) == ["Three", "Two"]


def test_spin_picks_from_filtered_recipes(fake_supabase):
    add_recipe(fake_supabase, title="Quick Salad", difficulty_level="easy")
    add_recipe(fake_supabase, title="Beef Wellington", difficulty_level="hard")

    service = RouletteService(fake_supabase, rng=random.Random(7))
    pick = run(service.spin(USER_ID, RecipeFilters(difficulty_level=DifficultyLevel.HARD)))

    assert pick["title"] == "Beef Wellington"
    assert set(pick) == {
        "id", "title", "description", "difficulty", "cuisine",
        "prepTime", "cookTime", "platform", "username", "imageUrl",
    }


def test_spin_covers_all_candidates(fake_supabase):
    for title in ["A", "B", "C"]:
        add_recipe(fake_supabase, title=title)

    service = RouletteService(fake_supabase, rng=random.Random(42))
    picks = {run(service.spin(USER_ID))["title"] for _ in range(50)}

    assert picks == {"A", "B", "C"}


def test_spin_without_matches(fake_supabase):
    add_recipe(fake_supabase, title="Quick Salad", meal_type="lunch")

    service = RouletteService(fake_supabase)

    assert run(service.spin(USER_ID, RecipeFilters(meal_type=MealType.DESSERT))) is None
