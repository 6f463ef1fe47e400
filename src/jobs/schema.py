"""
Storage layout of a job record.

Each persisted field is listed once with its store key and type. Records are
written as flat string mappings (a Redis hash); absent fields are left out.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from .record import JobRecord

TRUE_TEXT = "true"
FALSE_TEXT = "false"


@dataclass(frozen=True)
class FieldSpec:
    """One persisted field of a job record"""

    attribute: str
    key: str
    type: type
    required: bool = False


JOB_RECORD_SCHEMA = (
    FieldSpec("job_id", "jobId", int, required=True),
    FieldSpec("owner", "owner", str),
    FieldSpec("owner_email", "ownerEmail", str),
    FieldSpec("email_on_no_data", "emailOnNoData", bool),
    FieldSpec("user_query", "userQuery", str),
    FieldSpec("query", "query", str),
    FieldSpec("test_name", "testName", str),
    FieldSpec("test_description", "testDescription", str),
    FieldSpec("url", "url", str),
    FieldSpec("job_status", "jobStatus", str),
    FieldSpec("effective_run_time", "effectiveRunTime", int),
    FieldSpec("effective_query_time", "effectiveQueryTime", int),
    FieldSpec("granularity", "granularity", str),
    FieldSpec("timeseries_range", "timeseriesRange", int),
    FieldSpec("granularity_range", "granularityRange", int),
    FieldSpec("frequency", "frequency", str),
    FieldSpec("sigma_threshold", "sigmaThreshold", float),
    FieldSpec("cluster_id", "clusterId", int),
    FieldSpec("hours_of_lag", "hoursOfLag", int),
    FieldSpec("timeseries_framework", "timeseriesFramework", str),
    FieldSpec("timeseries_model", "timeseriesModel", str),
    FieldSpec("anomaly_detection_model", "anomalyDetectionModel", str),
    FieldSpec("prophet_growth_model", "prophetGrowthModel", str),
    FieldSpec("prophet_yearly_seasonality", "prophetYearlySeasonality", str),
    FieldSpec("prophet_weekly_seasonality", "prophetWeeklySeasonality", str),
    FieldSpec("prophet_daily_seasonality", "prophetDailySeasonality", str),
)


def record_to_mapping(record: JobRecord) -> dict[str, str]:
    """Render the present fields of a record as store key -> text"""
    mapping = {}
    for spec in JOB_RECORD_SCHEMA:
        value = getattr(record, spec.attribute)
        if value is None:
            continue
        if spec.type is bool:
            mapping[spec.key] = TRUE_TEXT if value else FALSE_TEXT
        else:
            mapping[spec.key] = str(value)
    return mapping


def record_from_mapping(mapping: Mapping[str, str]) -> JobRecord:
    """Rebuild a record from stored text.

    Keys missing from the mapping keep the record defaults.

    Raises:
        ValueError: If a required key is missing or a value does not match
            its declared type
    """
    record = JobRecord()
    for spec in JOB_RECORD_SCHEMA:
        raw = mapping.get(spec.key)
        if raw is None:
            if spec.required:
                raise ValueError(f"Stored job is missing required field {spec.key}")
            continue
        setattr(record, spec.attribute, _parse(spec, raw))
    return record


def _parse(spec: FieldSpec, raw: str):
    if spec.type is str:
        return raw
    if spec.type is bool:
        if raw.lower() not in (TRUE_TEXT, FALSE_TEXT):
            raise ValueError(f"Stored field {spec.key} is not a boolean: {raw!r}")
        return raw.lower() == TRUE_TEXT
    try:
        return spec.type(raw)
    except ValueError:
        raise ValueError(f"Stored field {spec.key} is not {spec.type.__name__}: {raw!r}") from None
