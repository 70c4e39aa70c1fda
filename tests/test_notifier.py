"""Tests for auto-dismissing notices."""

import asyncio

import pytest

from skycast.core.config import settings
from skycast.models.dashboard import Notice
from skycast.services.notifier import NoticeTimer


class TestNoticeTimer:
    """Test scheduling, replacement and cancellation."""

    @pytest.mark.asyncio
    async def test_dismissed_after_ttl(self):
        dismissed = []
        timer = NoticeTimer(dismissed.append, ttl=0.05)
        notice = Notice(kind="error", message="City not found")

        timer.schedule(notice)
        assert timer.pending is notice
        assert dismissed == []

        await asyncio.sleep(0.1)

        assert dismissed == [notice]
        assert timer.pending is None

    @pytest.mark.asyncio
    async def test_new_notice_replaces_and_resets_timer(self):
        dismissed = []
        timer = NoticeTimer(dismissed.append, ttl=0.1)
        first = Notice(kind="error", message="first")
        second = Notice(kind="success", message="second")

        timer.schedule(first)
        await asyncio.sleep(0.06)
        timer.schedule(second)
        await asyncio.sleep(0.06)

        # first would have expired by now had it not been replaced
        assert dismissed == []
        assert timer.pending is second

        await asyncio.sleep(0.1)

        assert dismissed == [second]

    @pytest.mark.asyncio
    async def test_cancel(self):
        dismissed = []
        timer = NoticeTimer(dismissed.append, ttl=0.02)

        timer.schedule(Notice(kind="success", message="done"))
        timer.cancel()
        await asyncio.sleep(0.05)

        assert dismissed == []
        assert timer.pending is None

    @pytest.mark.asyncio
    async def test_ttl_defaults_to_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "NOTICE_TTL", 0.02)
        dismissed = []
        timer = NoticeTimer(dismissed.append)

        timer.schedule(Notice(kind="success", message="done"))
        await asyncio.sleep(0.06)

        assert len(dismissed) == 1
