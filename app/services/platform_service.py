"""
Platform detection for submitted recipe URLs.

Recognizes TikTok, Instagram, YouTube, Pinterest, Facebook and X/Twitter
links, validates them before they are sent to the extraction webhook, and
provides per-platform presentation defaults (stock images, hints).
"""

from urllib.parse import urlparse, urlunparse
from typing import Dict, List, Optional
from dataclasses import dataclass

from app.domain.enums import Platform


# Domains accepted by the extraction webhook
SUPPORTED_PLATFORMS: List[str] = [
    "tiktok.com",
    "instagram.com",
    "youtube.com",
    "youtu.be",
    "pinterest.com",
    "facebook.com",
    "twitter.com",
    "x.com",
]

# Checked in order, first match wins
PLATFORM_DOMAINS = [
    (Platform.TIKTOK, ("tiktok.com",)),
    (Platform.INSTAGRAM, ("instagram.com",)),
    (Platform.YOUTUBE, ("youtube.com", "youtu.be")),
    (Platform.PINTEREST, ("pinterest.com",)),
    (Platform.FACEBOOK, ("facebook.com",)),
    (Platform.TWITTER, ("twitter.com", "x.com")),
]

DEFAULT_IMAGES: Dict[str, str] = {
    Platform.TIKTOK.value: "https://images.unsplash.com/photo-1621996346565-e3dbc646d9a9?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600",
    Platform.INSTAGRAM.value: "https://images.unsplash.com/photo-1511690743698-d9d85f2fbf38?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600",
    Platform.YOUTUBE.value: "https://images.unsplash.com/photo-1544025162-d76694265947?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600",
    Platform.PINTEREST.value: "https://images.unsplash.com/photo-1499636136210-6f4ee915583e?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600",
    Platform.FACEBOOK.value: "https://images.unsplash.com/photo-1565299624946-b28f40a0ca4b?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600",
    Platform.TWITTER.value: "https://images.unsplash.com/photo-1567620905732-2d1ec7ab7445?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600",
}

EXTRACTION_HINTS: Dict[str, List[str]] = {
    Platform.TIKTOK.value: [
        "Best results with cooking tutorials showing step-by-step preparation",
        "Ensure video has clear ingredient listings in caption or overlay text",
        "Works well with trending recipe videos with detailed instructions",
    ],
    Platform.YOUTUBE.value: [
        "Optimal for cooking channels with detailed descriptions",
        "Works best with videos that have ingredient lists in description",
        "Most effective with step-by-step cooking tutorials",
    ],
    Platform.INSTAGRAM.value: [
        "Best results with recipe posts that include ingredient lists",
        "Works well with cooking reels showing preparation steps",
        "Ensure post captions include detailed recipe information",
    ],
    Platform.PINTEREST.value: [
        "Effective with recipe pins that link to detailed blog posts",
        "Works best with pins containing complete ingredient lists",
        "Optimal for traditional recipe format pins",
    ],
}

GENERIC_HINTS = ["General recipe extraction hints not available"]

ERROR_MESSAGES: Dict[str, str] = {
    "Unsupported platform": (
        "This social media platform is not supported yet. "
        "We currently support TikTok, YouTube, Instagram, Pinterest, Facebook and X."
    ),
    "API processing failed": "Unable to extract recipe from this content. Please try a different URL.",
    "Network error": "Unable to connect to the recipe processing service. Please try again later.",
    "Invalid URL": "Please provide a valid social media URL.",
}

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while processing your recipe."


@dataclass
class UrlValidation:
    """Result of validating a submitted recipe URL"""
    is_valid: bool
    platform: str
    error: Optional[str] = None


def get_supported_platforms() -> List[str]:
    """Domains accepted for capture"""
    return list(SUPPORTED_PLATFORMS)


def is_supported_platform(url: str) -> bool:
    """Check if any supported domain appears in the URL"""
    if not url:
        return False
    url_lower = url.lower()
    return any(domain in url_lower for domain in SUPPORTED_PLATFORMS)


def get_platform(url: Optional[str]) -> str:
    """
    Get the platform name for a URL.

    Returns:
        Platform name, or "unknown" when no supported domain matches
    """
    if not url:
        return Platform.UNKNOWN.value

    url_lower = url.lower()
    for platform, domains in PLATFORM_DOMAINS:
        if any(domain in url_lower for domain in domains):
            return platform.value

    return Platform.UNKNOWN.value


def validate_url(url: str) -> UrlValidation:
    """
    Validate URL format and platform support.

    Args:
        url: Submitted URL

    Returns:
        UrlValidation with the detected platform, or the reason it was rejected
    """
    try:
        parsed = urlparse((url or "").strip())
    except ValueError:
        return UrlValidation(is_valid=False, platform=Platform.UNKNOWN.value, error="Invalid URL format")

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return UrlValidation(is_valid=False, platform=Platform.UNKNOWN.value, error="Invalid URL format")

    platform = get_platform(url)
    if platform == Platform.UNKNOWN.value:
        return UrlValidation(
            is_valid=False,
            platform=platform,
            error=f"Unsupported platform. Supported platforms: {', '.join(SUPPORTED_PLATFORMS)}"
        )

    return UrlValidation(is_valid=True, platform=platform)


def clean_url(url: str) -> str:
    """Remove query parameters and fragment (tracking params) from a URL"""
    if not url:
        return url

    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    return urlunparse(parsed._replace(query="", fragment=""))


def get_extraction_hints(platform: str) -> List[str]:
    """Tips for getting a good extraction from a platform"""
    return list(EXTRACTION_HINTS.get((platform or "").lower(), GENERIC_HINTS))


def get_error_message(error: str) -> str:
    """User-friendly text for a known error key"""
    return ERROR_MESSAGES.get(error, GENERIC_ERROR_MESSAGE)


def get_default_image(platform: Optional[str]) -> str:
    """Stock image for a platform, TikTok's when unknown"""
    return DEFAULT_IMAGES.get((platform or "").lower(), DEFAULT_IMAGES[Platform.TIKTOK.value])
