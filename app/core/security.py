"""
Security utilities and authentication
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client
import logging

from app.core.database import get_supabase_client

logger = logging.getLogger(__name__)
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    supabase: Client = Depends(get_supabase_client)
) -> dict:
    """
    Validate JWT token and return current user.

    The token is issued by Supabase Auth after the Google OAuth flow, so the
    API only verifies it and never handles provider callbacks itself.

    Args:
        credentials: HTTP Bearer token
        supabase: Supabase client

    Returns:
        User dict with id, email and user metadata

    Raises:
        HTTPException: If token is invalid or expired
    """
    token = credentials.credentials

    try:
        user_response = supabase.auth.get_user(token)
    except Exception as e:
        logger.error(f"Authentication error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user_response or not user_response.user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = user_response.user
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
    }


def ensure_same_user(current_user: dict, user_id: str) -> None:
    """Reject access to another user's private resources"""
    if str(current_user["id"]) != str(user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: you can only access your own data"
        )
