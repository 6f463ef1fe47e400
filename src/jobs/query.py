"""
Job parameters as submitted by a user through the web form.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import QueryParameterError

EMAIL_DELIMITER = ","

TRUE_PARAMETER_VALUES = {"true", "on"}


@dataclass
class UserSubmittedQuery:
    """Raw job parameters taken from a request"""

    query: str | None = None
    test_name: str | None = None
    test_description: str | None = None
    query_url: str | None = None
    owner: str | None = None
    owner_email: str | None = None
    email_on_no_data: bool | None = None
    query_end_time_text: str | None = None
    granularity: str | None = None
    frequency: str | None = None
    sigma_threshold: float | None = None
    druid_url: str | None = None
    cluster_id: int | None = None
    timeseries_range: int | None = None
    detection_window: int | None = None
    granularity_range: int | None = None
    ts_framework: str | None = None
    ts_models: str | None = None
    ad_models: str | None = None
    hours_of_lag: int | None = None
    growth_model: str | None = None
    yearly_seasonality: str | None = None
    weekly_seasonality: str | None = None
    daily_seasonality: str | None = None
    broker_host: str | None = None
    broker_port: int | None = None

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "UserSubmittedQuery":
        """Copy request parameters onto a new query by exact name match.

        Parameters without a matching field are ignored and fields without
        a parameter stay None. Multi-valued parameters contribute their
        first value.

        Raises:
            QueryParameterError: If a numeric parameter is not a number
        """
        values = {}
        for name, attribute, kind in QUERY_PARAMETERS:
            if name not in params:
                continue
            raw = params[name]
            if isinstance(raw, (list, tuple)):
                raw = raw[0] if raw else None
            if raw is None:
                continue
            values[attribute] = _coerce_parameter(name, str(raw), kind)
        return cls(**values)

    def normalized_owner_email(self) -> str | None:
        """Owner emails with spaces removed and duplicates dropped.

        The result is comma-joined with each address once, in first-seen
        order. Normalizing an already normalized value returns it unchanged.
        """
        if self.owner_email is None:
            return None
        emails = self.owner_email.replace(" ", "").split(EMAIL_DELIMITER)
        unique = dict.fromkeys(email for email in emails if email)
        return EMAIL_DELIMITER.join(unique)


QUERY_PARAMETERS = (
    ("query", "query", str),
    ("testName", "test_name", str),
    ("testDescription", "test_description", str),
    ("queryUrl", "query_url", str),
    ("owner", "owner", str),
    ("ownerEmail", "owner_email", str),
    ("emailOnNoData", "email_on_no_data", bool),
    ("queryEndTimeText", "query_end_time_text", str),
    ("granularity", "granularity", str),
    ("frequency", "frequency", str),
    ("sigmaThreshold", "sigma_threshold", float),
    ("druidUrl", "druid_url", str),
    ("clusterId", "cluster_id", int),
    ("timeseriesRange", "timeseries_range", int),
    ("detectionWindow", "detection_window", int),
    ("granularityRange", "granularity_range", int),
    ("tsFramework", "ts_framework", str),
    ("tsModels", "ts_models", str),
    ("adModels", "ad_models", str),
    ("hoursOfLag", "hours_of_lag", int),
    ("growthModel", "growth_model", str),
    ("yearlySeasonality", "yearly_seasonality", str),
    ("weeklySeasonality", "weekly_seasonality", str),
    ("dailySeasonality", "daily_seasonality", str),
    ("brokerHost", "broker_host", str),
    ("brokerPort", "broker_port", int),
)


def _coerce_parameter(name: str, raw: str, kind: type) -> Any:
    if kind is str:
        return raw
    if kind is bool:
        return raw.strip().lower() in TRUE_PARAMETER_VALUES
    try:
        return kind(raw.strip())
    except ValueError:
        raise QueryParameterError(name, raw) from None
