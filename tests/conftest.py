"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import MagicMock

import pytest

from src.jobs.query import UserSubmittedQuery
from src.jobs.record import JobRecord
from src.settings.config import ProcessConfiguration


# Job fixtures
@pytest.fixture
def submission():
    """A complete user submission for an hourly job."""
    return UserSubmittedQuery(
        query='{"queryType": "timeseries"}',
        test_name="pageviews",
        test_description="Hourly pageviews",
        query_url="http://superset.example.com/chart/12",
        owner="jdoe",
        owner_email="jdoe@example.com, ops@example.com,jdoe@example.com",
        email_on_no_data=True,
        granularity="hour",
        frequency="hour",
        sigma_threshold=3.0,
        cluster_id=2,
        timeseries_range=24,
        granularity_range=1,
        ts_framework="Prophet",
        ts_models="OlympicModel",
        ad_models="KSigmaModel",
        hours_of_lag=1,
        growth_model="logistic",
        yearly_seasonality="false",
        weekly_seasonality="true",
        daily_seasonality="auto",
    )


@pytest.fixture
def job(submission):
    """A persisted, running job built from the submission."""
    record = JobRecord.new_from_submission(submission, {"queryType": "timeseries"})
    record.job_id = 7
    record.job_status = "RUNNING"
    record.effective_run_time = 28_000_000
    record.effective_query_time = 27_999_940
    return record


# Settings fixtures
@pytest.fixture
def configuration():
    """Configuration holding the compiled-in defaults."""
    config = ProcessConfiguration()
    config.load_defaults()
    return config


@pytest.fixture
def properties_file(tmp_path):
    """Factory writing a properties file and returning its path."""

    def write(content: str) -> str:
        path = tmp_path / "service.properties"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write


# Redis fixtures
@pytest.fixture
def mock_redis():
    """Redis client mock with a pipeline that reports success."""
    client = MagicMock()
    pipe = MagicMock()
    pipe.execute.return_value = [1, 1, 1]
    client.pipeline.return_value = pipe
    return client


@pytest.fixture
def redis_connection(mock_redis):
    connection = MagicMock()
    connection.client = mock_redis
    return connection
