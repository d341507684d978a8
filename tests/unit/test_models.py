"""Unit tests for model defaults and datetime helpers."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from solosuccess.infrastructure.database.base_model import as_utc, utcnow
from solosuccess.infrastructure.database.models.goal import Goal, Priority, Task, WorkStatus
from solosuccess.infrastructure.database.models.scraping import JobStatus, ScrapingJob


class TestStatusValues:

    def test_defaults_are_plain_strings(self):
        task = Task(user_id=uuid4(), title="Draft pitch")
        goal = Goal(user_id=uuid4(), title="Raise seed")

        assert type(task.status) is str
        assert task.status == "pending"
        assert type(goal.priority) is str
        assert goal.priority == "medium"

    def test_scraping_job_default_status(self):
        job = ScrapingJob(user_id=uuid4(), competitor_id=uuid4(), url="https://example.com", job_type="website")

        assert type(job.status) is str
        assert job.status == JobStatus.PENDING

    def test_members_compare_equal_to_stored_values(self):
        assert WorkStatus.COMPLETED == "completed"
        assert WorkStatus("in-progress") is WorkStatus.IN_PROGRESS
        assert [p.value for p in Priority] == ["low", "medium", "high"]


class TestDatetimeHelpers:

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo is not None
        assert utcnow().utcoffset() == timedelta(0)

    @pytest.mark.parametrize(
        "value",
        [
            datetime(2030, 6, 1, 0, 0),
            datetime(2030, 6, 1, 2, 0, tzinfo=timezone(timedelta(hours=2))),
            datetime(2030, 6, 1, 0, 0, tzinfo=timezone.utc),
        ],
    )
    def test_as_utc(self, value):
        assert as_utc(value) == datetime(2030, 6, 1, tzinfo=timezone.utc)
        assert as_utc(value).tzinfo == timezone.utc

    def test_as_utc_passes_none(self):
        assert as_utc(None) is None
