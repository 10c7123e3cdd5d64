"""
Background scheduler for periodic gamification maintenance.

Weekly points drive the leaderboard and reset once a week, by default on
Monday at 00:00 UTC.
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

WEEKLY_RESET_JOB_ID = "reset_weekly_points"


async def reset_weekly_points_job() -> int:
    """Reset every user's weekly points. Returns the number of users reset."""
    from app.core.database import get_supabase_admin_client
    from app.services.gamification_service import GamificationService

    service = GamificationService(get_supabase_admin_client())
    try:
        reset_count = await service.reset_weekly_points()
    except Exception as e:
        logger.error(f"Weekly points reset failed: {e}")
        raise

    logger.info(f"Weekly points reset for {reset_count} users")
    return reset_count


def start_weekly_reset_scheduler(
    day_of_week: str = "mon",
    hour: int = 0
) -> AsyncIOScheduler:
    """
    Start a background scheduler that resets weekly points.

    Args:
        day_of_week: Cron day of week (mon, tue, ...)
        hour: Hour of day in UTC
    """
    scheduler = AsyncIOScheduler(timezone="UTC")

    scheduler.add_job(
        reset_weekly_points_job,
        trigger=CronTrigger(day_of_week=day_of_week, hour=hour, minute=0, timezone="UTC"),
        id=WEEKLY_RESET_JOB_ID,
        name="Reset weekly leaderboard points",
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"Started weekly points reset scheduler: every {day_of_week} at {hour:02d}:00 UTC")

    return scheduler
