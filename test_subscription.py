"""
Tests for the simulated Pro subscription
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.exceptions import UserNotFoundError
from app.services.subscription_service import SubscriptionService
from conftest import TEST_USER, add_user

USER_ID = TEST_USER["id"]
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_service(db, now=NOW):
    return SubscriptionService(db, subscription_days=30, clock=lambda: now)


def test_free_user_status(fake_supabase):
    add_user(fake_supabase)

    status = asyncio.run(make_service(fake_supabase).get_status(USER_ID))

    assert status == {"is_pro": False, "expires_at": None, "plan_type": "free"}


def test_subscribe_sets_pro_for_thirty_days(fake_supabase):
    add_user(fake_supabase)

    status = asyncio.run(make_service(fake_supabase).subscribe(USER_ID))

    assert status["is_pro"] is True
    assert status["plan_type"] == "pro"
    assert status["expires_at"] == (NOW + timedelta(days=30)).isoformat()


def test_expired_subscription_is_free(fake_supabase):
    add_user(fake_supabase, is_pro=True, pro_expires_at="2026-10-01T00:00:00Z")
    service = make_service(fake_supabase)

    status = asyncio.run(service.get_status(USER_ID))

    assert status["is_pro"] is False
    assert status["plan_type"] == "free"
    assert asyncio.run(service.is_premium(USER_ID)) is False


def test_unknown_user(fake_supabase):
    service = make_service(fake_supabase)

    with pytest.raises(UserNotFoundError):
        asyncio.run(service.subscribe(USER_ID))
    with pytest.raises(UserNotFoundError):
        asyncio.run(service.get_status(USER_ID))
    assert asyncio.run(service.is_premium(USER_ID)) is False
