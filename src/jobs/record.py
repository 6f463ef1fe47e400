"""
Persisted record of a scheduled anomaly detection job.

A record holds the user's query, its schedule parameters, the detector model
selection and the run-time status written by the scheduler. The record only
exposes predicates over its status; transitions are made by the scheduler and
executor that own it.
"""

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import UTC, datetime
from typing import Any

import structlog

from .errors import CopyError, DisplayFormattingFailure, InvalidScheduleState
from .models import (
    DEFAULT_ANOMALY_DETECTION_MODEL,
    DEFAULT_PROPHET_GROWTH_MODEL,
    DEFAULT_PROPHET_SEASONALITY,
    DEFAULT_TIMESERIES_FRAMEWORK,
    DEFAULT_TIMESERIES_MODEL,
    Granularity,
    JobStatus,
)
from .query import EMAIL_DELIMITER, UserSubmittedQuery

logger = structlog.get_logger(__name__)

SYNTAX_ERROR_PLACEHOLDER = "Syntax error"

RUNNING_STATUSES = {JobStatus.RUNNING.value, JobStatus.NODATA.value}

NEXT_RUN_TIME_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(eq=False)
class JobRecord:
    """A scheduled anomaly detection job.

    Two records are equal when their job ids are equal. Every record that
    has not been persisted yet has no id, so all such records compare equal
    to each other and share the hash value 1.

    Time fields are minutes since the epoch, UTC. ``effective_query_time``
    is expected not to exceed ``effective_run_time``; the scheduler keeps
    that contract, the record does not check it.

    Not thread-safe: concurrent ``update`` calls on one record must be
    serialized by the owner (see ``JobStore``).
    """

    job_id: int | None = None
    owner: str | None = None
    owner_email: str | None = None
    email_on_no_data: bool = False
    user_query: str | None = None
    query: str | None = None
    test_name: str | None = None
    test_description: str | None = None
    url: str | None = None
    job_status: str | None = None
    effective_run_time: int | None = None
    effective_query_time: int | None = None
    granularity: str | None = None
    timeseries_range: int | None = None
    granularity_range: int = 1
    frequency: str | None = None
    sigma_threshold: float | None = None
    cluster_id: int | None = None
    hours_of_lag: int | None = None
    timeseries_framework: str = DEFAULT_TIMESERIES_FRAMEWORK
    timeseries_model: str = DEFAULT_TIMESERIES_MODEL
    anomaly_detection_model: str = DEFAULT_ANOMALY_DETECTION_MODEL
    prophet_growth_model: str = DEFAULT_PROPHET_GROWTH_MODEL
    prophet_yearly_seasonality: str = DEFAULT_PROPHET_SEASONALITY
    prophet_weekly_seasonality: str = DEFAULT_PROPHET_SEASONALITY
    prophet_daily_seasonality: str = DEFAULT_PROPHET_SEASONALITY

    @classmethod
    def new_from_submission(
        cls,
        submission: UserSubmittedQuery,
        resolved_query: Mapping[str, Any] | str | None = None,
    ) -> "JobRecord":
        """Create a new job from a user submission.

        The job starts in CREATED with both time fields unset. A resolved
        query given as a mapping is stored as JSON text. Submission fields
        left empty keep the record defaults where the record has one.
        """
        if resolved_query is not None and not isinstance(resolved_query, str):
            resolved_query = json.dumps(resolved_query)

        job = cls(
            owner=submission.owner,
            owner_email=submission.normalized_owner_email(),
            user_query=submission.query,
            query=resolved_query,
            test_name=submission.test_name,
            test_description=submission.test_description,
            url=submission.query_url,
            job_status=JobStatus.CREATED.value,
            granularity=submission.granularity,
            timeseries_range=submission.timeseries_range,
            frequency=submission.frequency,
            sigma_threshold=submission.sigma_threshold,
            cluster_id=submission.cluster_id,
            hours_of_lag=submission.hours_of_lag,
        )
        optional = {
            "email_on_no_data": submission.email_on_no_data,
            "granularity_range": submission.granularity_range,
            "timeseries_framework": submission.ts_framework,
            "timeseries_model": submission.ts_models,
            "anomaly_detection_model": submission.ad_models,
            "prophet_growth_model": submission.growth_model,
            "prophet_yearly_seasonality": submission.yearly_seasonality,
            "prophet_weekly_seasonality": submission.weekly_seasonality,
            "prophet_daily_seasonality": submission.daily_seasonality,
        }
        for name, value in optional.items():
            if value is not None:
                setattr(job, name, value)
        return job

    @classmethod
    def from_record(cls, other: "JobRecord") -> "JobRecord":
        """Field-by-field copy of another record, time fields included"""
        return cls(**{f.name: getattr(other, f.name) for f in fields(cls)})

    @classmethod
    def copy_job(cls, job: "JobRecord") -> "JobRecord":
        """Duplicate a job as a template for a fresh execution.

        The duplicate has every field of the source except the two time
        fields, which are cleared.

        Raises:
            CopyError: If the source cannot be duplicated
        """
        if not isinstance(job, cls):
            raise CopyError(getattr(job, "job_id", None), f"not a {cls.__name__}")
        try:
            duplicate = copy.deepcopy(job)
        except (copy.Error, TypeError, RecursionError) as e:
            logger.error("Exception while cloning the job", job_id=job.job_id, error=str(e))
            raise CopyError(job.job_id, str(e)) from e
        duplicate.effective_run_time = None
        duplicate.effective_query_time = None
        return duplicate

    def update(self, newer: "JobRecord") -> None:
        """Overwrite the user-editable fields with those of a newer record.

        The resolved query is replaced only when the newer record carries
        one. Job id, status and the time fields belong to the scheduler and
        are left as they are.
        """
        if newer.query is not None:
            self.query = newer.query
        for name in UPDATABLE_FIELDS:
            setattr(self, name, getattr(newer, name))

    def is_schedule_change_required(self, submission: UserSubmittedQuery) -> bool:
        """Whether a submission changes when this job has to run.

        True if granularity, frequency, cluster or hours of lag differ. A
        field that is unset on this record always counts as a change.
        """
        pairs = (
            (self.granularity, submission.granularity),
            (self.frequency, submission.frequency),
            (self.cluster_id, submission.cluster_id),
            (self.hours_of_lag, submission.hours_of_lag),
        )
        return any(current is None or current != submitted for current, submitted in pairs)

    def is_running(self) -> bool:
        return self.job_status in RUNNING_STATUSES

    def is_no_data(self) -> bool:
        return self.job_status == JobStatus.NODATA.value

    def report_nominal_time(self) -> int:
        """End of the reporting window, one granularity range before the query time.

        Raises:
            InvalidScheduleState: If the granularity is unrecognized or the
                query time or granularity range is unset
        """
        granularity = Granularity.lookup(self.granularity)
        if granularity is None:
            raise InvalidScheduleState(
                f"Job {self.job_id} has unrecognized granularity {self.granularity!r}"
            )
        if self.effective_query_time is None:
            raise InvalidScheduleState(f"Job {self.job_id} has no effective query time")
        if self.granularity_range is None:
            raise InvalidScheduleState(f"Job {self.job_id} has no granularity range")
        return self.effective_query_time - granularity.minutes * self.granularity_range

    def owner_emails_as_list(self) -> list[str]:
        """Split the stored owner emails on commas, dropping trailing empty entries"""
        if not self.owner_email or not self.owner_email.strip():
            return []
        emails = self.owner_email.split(EMAIL_DELIMITER)
        while emails and not emails[-1]:
            emails.pop()
        return emails

    def pretty_query(self) -> str:
        """Indented JSON rendering of the resolved query, for display only.

        Returns the "Syntax error" placeholder when the query is missing or
        is not valid JSON.
        """
        try:
            return format_query(self.query)
        except DisplayFormattingFailure as e:
            logger.debug("Query could not be formatted", job_id=self.job_id, error=str(e))
            return SYNTAX_ERROR_PLACEHOLDER

    def formatted_next_run_time(self) -> str | None:
        """Next run time as 'YYYY-MM-DD HH:MM' in UTC"""
        if self.effective_run_time is None:
            return None
        moment = datetime.fromtimestamp(self.effective_run_time * 60, tz=UTC)
        return moment.strftime(NEXT_RUN_TIME_FORMAT)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, JobRecord):
            return NotImplemented
        return self.job_id == other.job_id

    def __hash__(self) -> int:
        return 1 if self.job_id is None else hash(self.job_id)

    def __str__(self) -> str:
        return "".join(f"{f.name}: {getattr(self, f.name)}\n" for f in fields(self))


UPDATABLE_FIELDS = (
    "owner",
    "owner_email",
    "email_on_no_data",
    "user_query",
    "test_name",
    "test_description",
    "url",
    "granularity",
    "timeseries_range",
    "granularity_range",
    "frequency",
    "sigma_threshold",
    "cluster_id",
    "hours_of_lag",
    "timeseries_framework",
    "timeseries_model",
    "anomaly_detection_model",
    "prophet_growth_model",
    "prophet_daily_seasonality",
    "prophet_weekly_seasonality",
    "prophet_yearly_seasonality",
)


def format_query(query: str | None) -> str:
    """Pretty-print JSON query text.

    Raises:
        DisplayFormattingFailure: If the text is missing or malformed
    """
    if query is None:
        raise DisplayFormattingFailure("No query to format")
    try:
        return json.dumps(json.loads(query), indent=2)
    except (TypeError, ValueError, RecursionError) as e:
        raise DisplayFormattingFailure(str(e)) from e
