"""
Tests for the weekly points reset job
"""
import asyncio

from app.core import database
from app.core.scheduler import WEEKLY_RESET_JOB_ID, reset_weekly_points_job, start_weekly_reset_scheduler
from conftest import add_user


def test_scheduler_registers_weekly_job():
    async def start_and_inspect():
        scheduler = start_weekly_reset_scheduler(day_of_week="mon", hour=0)
        try:
            job = scheduler.get_job(WEEKLY_RESET_JOB_ID)
            fields = {field.name: str(field) for field in job.trigger.fields}
            return fields
        finally:
            scheduler.shutdown(wait=False)

    fields = asyncio.run(start_and_inspect())

    assert fields["day_of_week"] == "mon"
    assert fields["hour"] == "0"
    assert fields["minute"] == "0"


def test_reset_job_zeroes_weekly_points(fake_supabase, monkeypatch):
    add_user(fake_supabase, "user-a", weekly_points=40, points=40)
    add_user(fake_supabase, "user-b", weekly_points=0, points=10)
    monkeypatch.setattr(database, "get_supabase_admin_client", lambda: fake_supabase)

    reset = asyncio.run(reset_weekly_points_job())

    assert reset == 1
    assert [row["weekly_points"] for row in fake_supabase.tables["users"]] == [0, 0]
