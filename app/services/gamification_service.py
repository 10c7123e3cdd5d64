"""
Gamification service: points, cooking streaks and challenges.

Business Rules:
- Every recipe action is recorded (cooked, liked, shared, bookmarked)
- Cooking a recipe awards POINTS_PER_COOK points and weekly points
- The streak counts consecutive UTC calendar days with at least one cook
- Cooking advances every joined, unfinished, active challenge by one
- Reaching the target completes the challenge and awards its reward
- Weekly points reset every week (Monday 00:00 UTC by default)
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, List, Dict, Any, Tuple
from supabase import Client
import logging

from app.core.config import get_settings
from app.domain.enums import UserAction
from app.domain.exceptions import ChallengeNotFoundError, RecipeNotFoundError, UserNotFoundError
from app.repositories.challenge_repository import ChallengeRepository, UserChallengeRepository
from app.repositories.extracted_recipe_repository import ExtractedRecipeRepository
from app.repositories.user_recipe_action_repository import UserRecipeActionRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_streak(current_streak: int, last_cooked_at: Any, now: datetime) -> int:
    """
    Streak after cooking at `now`.

    Same UTC day keeps the streak, the following day extends it, any longer
    gap starts over at 1.
    """
    last = _parse_timestamp(last_cooked_at)
    if last is None:
        return 1

    today = now.astimezone(timezone.utc).date()
    last_day = last.astimezone(timezone.utc).date()

    if last_day == today:
        return max(current_streak or 0, 1)
    if last_day == today - timedelta(days=1):
        return (current_streak or 0) + 1
    return 1


class GamificationService:
    """Service for user actions, streaks, challenges and the leaderboard"""

    def __init__(
        self,
        supabase: Client,
        points_per_cook: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.user_repo = UserRepository(supabase)
        self.recipe_repo = ExtractedRecipeRepository(supabase)
        self.action_repo = UserRecipeActionRepository(supabase)
        self.challenge_repo = ChallengeRepository(supabase)
        self.user_challenge_repo = UserChallengeRepository(supabase)
        self.points_per_cook = points_per_cook if points_per_cook is not None else get_settings().POINTS_PER_COOK
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def record_action(self, user_id: str, recipe_id: str, action: UserAction) -> Dict[str, Any]:
        """
        Record an action on a recipe and apply its rewards.

        Args:
            user_id: Authenticated user, never taken from the request body
            recipe_id: Recipe the action applies to
            action: cooked, liked, shared or bookmarked

        Returns:
            Dict with the stored action, points awarded and completed challenge IDs

        Raises:
            UserNotFoundError: No profile for the user
            RecipeNotFoundError: Recipe does not exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        recipe = await self.recipe_repo.get_by_id(recipe_id)
        if not recipe:
            raise RecipeNotFoundError(recipe_id)

        now = self.clock()
        action_row = await self.action_repo.create({
            "user_id": user_id,
            "recipe_id": recipe_id,
            "action": action.value,
            "created_at": now.isoformat(),
        })

        points_awarded = 0
        completed: List[int] = []

        if action == UserAction.COOKED:
            points_awarded, completed = await self._apply_cook(user, now)

        logger.info(f"User {user_id} {action.value} recipe {recipe_id} (+{points_awarded} points)")

        return {
            "action": action_row,
            "points_awarded": points_awarded,
            "completed_challenges": completed,
        }

    async def _apply_cook(self, user: Dict[str, Any], now: datetime) -> Tuple[int, List[int]]:
        user_id = user["id"]
        streak = next_streak(user.get("streak") or 0, user.get("last_cooked_at"), now)

        await self.user_repo.add_points(user_id, self.points_per_cook, recipes_cooked=1)
        await self.user_repo.update(user_id, {
            "streak": streak,
            "last_cooked_at": now.isoformat(),
            "updated_at": now.isoformat(),
        })

        points_awarded = self.points_per_cook
        completed: List[int] = []

        user_challenges = await self.user_challenge_repo.get_incomplete(user_id)
        if not user_challenges:
            return points_awarded, completed

        challenges = await self.challenge_repo.get_by_ids(uc["challenge_id"] for uc in user_challenges)
        challenges_by_id = {c["id"]: c for c in challenges}

        for user_challenge in user_challenges:
            challenge = challenges_by_id.get(user_challenge["challenge_id"])
            if not challenge or not challenge.get("is_active"):
                continue

            _, reward = await self._set_progress(
                user_challenge,
                challenge,
                (user_challenge.get("progress") or 0) + 1,
                now
            )
            if reward:
                points_awarded += reward
                completed.append(challenge["id"])

        return points_awarded, completed

    async def _set_progress(
        self,
        user_challenge: Dict[str, Any],
        challenge: Dict[str, Any],
        progress: int,
        now: datetime
    ) -> Tuple[Dict[str, Any], int]:
        """Store progress, completing the challenge when the target is reached. Returns the reward granted."""
        data: Dict[str, Any] = {"progress": progress}
        reward = 0

        if not user_challenge.get("completed") and progress >= (challenge.get("target") or 0):
            data["completed"] = True
            data["completed_at"] = now.isoformat()
            reward = challenge.get("reward") or 0

        updated = await self.user_challenge_repo.update(user_challenge["id"], data)

        if reward:
            await self._award_points(user_challenge["user_id"], reward)
            logger.info(f"User {user_challenge['user_id']} completed challenge {challenge['id']} (+{reward} points)")

        return updated or {**user_challenge, **data}, reward

    async def _award_points(self, user_id: str, points: int) -> None:
        if not await self.user_repo.add_points(user_id, points):
            raise UserNotFoundError(user_id)

    async def list_challenges(self) -> List[Dict[str, Any]]:
        return await self.challenge_repo.get_active()

    async def get_active_user_challenges(self, user_id: str) -> List[Dict[str, Any]]:
        """Unfinished challenges the user joined, each with its challenge definition"""
        user_challenges = await self.user_challenge_repo.get_incomplete(user_id)
        if not user_challenges:
            return []

        challenges = await self.challenge_repo.get_by_ids(uc["challenge_id"] for uc in user_challenges)
        challenges_by_id = {c["id"]: c for c in challenges}

        return [
            {**uc, "challenge": challenges_by_id.get(uc["challenge_id"])}
            for uc in user_challenges
        ]

    async def join_challenge(self, user_id: str, challenge_id: int) -> Dict[str, Any]:
        """
        Join an active challenge. Joining twice returns the existing entry.

        Raises:
            ChallengeNotFoundError: Challenge is unknown or inactive
        """
        challenge = await self.challenge_repo.get_by_id(challenge_id)
        if not challenge or not challenge.get("is_active"):
            raise ChallengeNotFoundError(challenge_id)

        existing = await self.user_challenge_repo.get(user_id, challenge_id)
        if existing:
            return {**existing, "challenge": challenge}

        created = await self.user_challenge_repo.create({
            "user_id": user_id,
            "challenge_id": challenge_id,
            "progress": 0,
            "completed": False,
        })
        logger.info(f"User {user_id} joined challenge {challenge_id}")
        return {**(created or {}), "challenge": challenge}

    async def update_challenge_progress(
        self,
        user_id: str,
        challenge_id: int,
        progress: int
    ) -> Optional[Dict[str, Any]]:
        """Set progress on a joined challenge. Returns None when the user has not joined it."""
        user_challenge = await self.user_challenge_repo.get(user_id, challenge_id)
        if not user_challenge:
            return None

        challenge = await self.challenge_repo.get_by_id(challenge_id)
        if not challenge:
            raise ChallengeNotFoundError(challenge_id)

        updated, _ = await self._set_progress(user_challenge, challenge, progress, self.clock())
        return updated

    async def reset_weekly_points(self) -> int:
        """Zero everyone's weekly points. Returns how many users were reset."""
        reset = await self.user_repo.reset_weekly_points()
        logger.info(f"Weekly points reset for {reset} users")
        return reset

    async def get_leaderboard(self, limit: int = 10) -> List[Dict[str, Any]]:
        rows = await self.user_repo.get_leaderboard(limit)
        return [{**row, "rank": index + 1} for index, row in enumerate(rows)]
