"""
Main API v1 router
"""
from fastapi import APIRouter

from app.api.v1.endpoints import users, recipes, gamification, subscriptions

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(users.router)
api_router.include_router(recipes.router)
api_router.include_router(gamification.router)
api_router.include_router(subscriptions.router)
