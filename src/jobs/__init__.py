"""
Anomaly detection job model.

A job couples a user's timeseries query with its schedule (granularity,
frequency, cluster and data lag) and the detector models to run. Jobs are
created from a web submission, persisted in Redis and driven through their
statuses by the scheduler.
"""

from .errors import (
    CopyError,
    DisplayFormattingFailure,
    InvalidScheduleState,
    JobError,
    JobNotFoundError,
    QueryParameterError,
)
from .models import Granularity, JobStatus
from .query import UserSubmittedQuery
from .record import JobRecord
from .schema import JOB_RECORD_SCHEMA, FieldSpec, record_from_mapping, record_to_mapping
from .store import JobStore

__all__ = [
    "CopyError",
    "DisplayFormattingFailure",
    "FieldSpec",
    "Granularity",
    "InvalidScheduleState",
    "JOB_RECORD_SCHEMA",
    "JobError",
    "JobNotFoundError",
    "JobRecord",
    "JobStatus",
    "JobStore",
    "QueryParameterError",
    "UserSubmittedQuery",
    "record_from_mapping",
    "record_to_mapping",
]
