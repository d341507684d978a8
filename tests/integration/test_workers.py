# tests/integration/test_workers.py
"""Integration tests for the async bodies of the Celery tasks."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import select

from solosuccess.infrastructure.database.models import ScrapingJob, ScrapingResult, SocialMediaAnalysis, User
from solosuccess.workers.celery_app import task_payload
from solosuccess.workers.tasks.cleanup import delete_old_analyses
from solosuccess.workers.tasks.monitoring import execute_due_scraping_cycle, process_social_media_cycle
from solosuccess.workers.tasks.notifications import deliver_welcome_email
from tests.factories import SocialMediaPostFactory


@pytest.fixture
def sent_emails(monkeypatch) -> list[dict]:
    sent = []

    async def _send(to, subject, html):
        sent.append({"to": to, "subject": subject})
        return {"id": f"msg_{len(sent)}"}

    monkeypatch.setattr("solosuccess.workers.tasks.notifications.send_email", _send)
    return sent


def scraping_job(user_id, competitor_id, **overrides) -> ScrapingJob:
    values = {
        "user_id": user_id,
        "competitor_id": competitor_id,
        "job_type": "website",
        "url": "https://acme.example.com",
        "priority": "medium",
        "frequency": {"type": "interval", "value": 60},
        "config": {},
        "next_run_at": datetime.now(timezone.utc) - timedelta(minutes=1),
    }
    values.update(overrides)
    return ScrapingJob(**values)


@pytest.mark.integration
class TestWelcomeEmail:

    async def test_sent_once(self, db_session, user, sent_emails):
        first = await deliver_welcome_email(user.id)
        second = await deliver_welcome_email(user.id)

        assert first == {"status": "sent", "provider_id": "msg_1"}
        assert second == {"status": "skipped", "reason": "already_sent"}
        assert sent_emails == [{"to": user.email, "subject": sent_emails[0]["subject"]}]

        await db_session.refresh(user)
        assert user.welcome_email_sent_at is not None

    async def test_unknown_user(self, test_engine, sent_emails):
        result = await deliver_welcome_email(uuid4())

        assert result == {"status": "skipped", "reason": "user_not_found"}
        assert sent_emails == []

    async def test_email_disabled(self, db_session, user):
        result = await deliver_welcome_email(user.id)

        assert result == {"status": "skipped", "reason": "email_disabled"}
        stored = (await db_session.execute(select(User).where(User.id == user.id))).scalar_one()
        assert stored.welcome_email_sent_at is None


@pytest.mark.integration
class TestCleanup:

    async def test_delete_old_analyses(self, db_session, competitor):
        now = datetime.now(timezone.utc)
        for days in (1, 29, 31, 90):
            db_session.add(
                SocialMediaAnalysis(
                    competitor_id=competitor.id,
                    platform="linkedin",
                    analysis_type="engagement",
                    analyzed_at=now - timedelta(days=days),
                )
            )
        await db_session.commit()

        result = await delete_old_analyses(30)

        assert result == {"deleted_count": 2, "retention_days": 30}

    async def test_default_retention(self, test_engine, test_settings):
        result = await delete_old_analyses()

        assert result == {"deleted_count": 0, "retention_days": test_settings.social_analysis_retention_days}


@pytest.mark.integration
class TestMonitoring:

    async def test_social_media_cycle(self, db_session, competitor):
        await SocialMediaPostFactory.create_batch_async(session=db_session, size=2, competitor_id=competitor.id)

        summary = await process_social_media_cycle()

        assert summary["analyzed"] == 1
        assert summary["failed"] == 0
        assert "error" not in summary
        await db_session.refresh(competitor)
        assert competitor.last_analyzed is not None

    async def test_due_scraping_jobs(self, db_session, user, competitor, monkeypatch):
        async def _fetch(url, timeout, user_agent):
            return 200, "<p>Plans from $9</p>"

        monkeypatch.setattr("solosuccess.services.scraping.fetch_page", _fetch)
        due = scraping_job(user.id, competitor.id)
        paused = scraping_job(user.id, competitor.id, status="paused")
        later = scraping_job(user.id, competitor.id, next_run_at=datetime.now(timezone.utc) + timedelta(hours=1))
        db_session.add_all([due, paused, later])
        await db_session.commit()

        summary = await execute_due_scraping_cycle(limit=10)

        assert summary == {"due": 1, "executed": 1, "failed": 0}
        results = (await db_session.execute(select(ScrapingResult))).scalars().all()
        assert [r.job_id for r in results] == [due.id]
        await db_session.refresh(due)
        assert due.status == "completed"
        assert due.next_run_at > datetime.now(timezone.utc)


class TestTaskPayload:

    def test_datetimes_serialised(self):
        moment = datetime(2030, 1, 2, 3, 4, 5)

        assert task_payload({"last_processed": moment, "analyzed": 3}) == {
            "last_processed": "2030-01-02T03:04:05",
            "analyzed": 3,
        }
