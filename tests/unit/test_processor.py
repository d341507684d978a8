"""Unit tests for the in-process social-media processor."""

import asyncio
from unittest.mock import AsyncMock

from solosuccess.services.processor import SocialMediaJobProcessor


class TestProcessorLifecycle:

    async def test_start_and_stop(self, monkeypatch):
        processor = SocialMediaJobProcessor()
        monkeypatch.setattr(processor, "process_jobs", AsyncMock(return_value={"skipped": False}))

        assert processor.start(interval_minutes=30) is True
        assert processor.start() is False
        assert processor.is_running
        assert processor.interval_minutes == 30

        await asyncio.sleep(0)
        processor.process_jobs.assert_awaited_once()

        assert processor.stop() is True
        assert processor.stop() is False
        assert not processor.is_running

    async def test_cycle_skipped_while_processing(self):
        processor = SocialMediaJobProcessor()
        processor.is_processing = True

        assert await processor.process_jobs() == {"skipped": True}

    async def test_failed_cycle_clears_processing_flag(self):
        # No database is bound here, so the cycle fails on its first session
        processor = SocialMediaJobProcessor()

        summary = await processor.process_jobs()

        assert "error" in summary
        assert processor.is_processing is False
        assert processor.last_processed is None

    def test_status(self):
        status = SocialMediaJobProcessor().get_status()

        assert status == {
            "is_running": False,
            "is_processing": False,
            "interval_minutes": 15,
            "last_processed": None,
        }
