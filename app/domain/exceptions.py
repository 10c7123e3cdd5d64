"""
Custom exceptions for domain-specific errors
"""
from typing import Optional


class InvalidRecipeUrlError(Exception):
    """Raised when a submitted URL is not a well-formed http(s) URL"""

    def __init__(self, url: str, message: str = "Invalid URL format"):
        self.url = url
        self.message = message
        super().__init__(self.message)


class UnsupportedPlatformError(Exception):
    """Raised when a URL is well-formed but not from a supported platform"""

    def __init__(self, url: str, message: str = "Unsupported platform"):
        self.url = url
        self.message = message
        super().__init__(self.message)


class WebhookServiceError(Exception):
    """
    Raised when the extraction webhook answers with a non-2xx status.
    A 429 answer produces a message mentioning the rate limit so callers
    can surface a retry hint.
    """

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        if status_code == 429:
            self.message = f"Webhook API rate limit reached ({status_code}): {body}"
        else:
            self.message = f"Webhook API error ({status_code}): {body}"
        super().__init__(self.message)

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429 or "rate limit" in self.body.lower()


class WebhookNetworkError(Exception):
    """Raised when the extraction webhook cannot be reached"""

    def __init__(self, message: str = "Network error: Unable to connect to video processing service"):
        self.message = message
        super().__init__(self.message)


class WebhookResponseFormatError(Exception):
    """Raised when the webhook body matches neither known response shape"""

    def __init__(self, message: str = "Invalid data format"):
        self.message = message
        super().__init__(self.message)


class RecipeNotFoundError(Exception):
    """Raised when a recipe does not exist"""

    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id
        self.message = "Recipe not found"
        super().__init__(self.message)


class RecipeAccessDeniedError(Exception):
    """Raised when a user touches a recipe captured by someone else"""

    def __init__(self, recipe_id: str, message: Optional[str] = None):
        self.recipe_id = recipe_id
        self.message = message or "Access denied - you can only access your own recipes"
        super().__init__(self.message)


class ContentNotFoundError(Exception):
    """Raised when a submitted social media content row does not exist"""

    def __init__(self, content_id: str):
        self.content_id = content_id
        self.message = "Capture not found"
        super().__init__(self.message)


class UserNotFoundError(Exception):
    """Raised when a user profile does not exist"""

    def __init__(self, user_id: str):
        self.user_id = user_id
        self.message = "User not found"
        super().__init__(self.message)


class UsernameTakenError(Exception):
    """Raised when a requested username belongs to another user"""

    def __init__(self, username: str):
        self.username = username
        self.message = f"Username '{username}' is already taken"
        super().__init__(self.message)


class ChallengeNotFoundError(Exception):
    """Raised when a challenge is missing or no longer active"""

    def __init__(self, challenge_id: int):
        self.challenge_id = challenge_id
        self.message = "Challenge not found"
        super().__init__(self.message)
