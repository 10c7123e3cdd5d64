#!/usr/bin/env python3
"""
Seed the default challenges.

Existing challenges (matched by title) are left untouched, so the script
can be run on every deploy.

Usage:
    python scripts/seed_challenges.py
"""

import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.database import get_supabase_admin_client
from app.core.logging_config import setup_logging
from app.domain.enums import ChallengeType
from app.repositories.challenge_repository import ChallengeRepository

logger = logging.getLogger(__name__)

DEFAULT_CHALLENGES = [
    {
        "title": "Veggie Week Challenge",
        "description": "Cook 5 vegetarian recipes this week",
        "type": ChallengeType.WEEKLY.value,
        "target": 5,
        "reward": 100,
        "is_active": True,
    },
    {
        "title": "Quick Cook Master",
        "description": "Make 10 recipes under 30 minutes",
        "type": ChallengeType.MONTHLY.value,
        "target": 10,
        "reward": 250,
        "is_active": True,
    },
]


async def seed_challenges(repo: ChallengeRepository) -> int:
    """Insert missing default challenges. Returns how many were created."""
    created = 0
    for challenge in DEFAULT_CHALLENGES:
        if await repo.get_by_title(challenge["title"]):
            logger.info(f"Challenge already exists: {challenge['title']}")
            continue
        await repo.create(challenge)
        logger.info(f"Created challenge: {challenge['title']}")
        created += 1
    return created


def main() -> None:
    setup_logging()
    repo = ChallengeRepository(get_supabase_admin_client())
    created = asyncio.run(seed_challenges(repo))
    logger.info(f"Seeding complete, {created} challenge(s) created")


if __name__ == "__main__":
    main()
