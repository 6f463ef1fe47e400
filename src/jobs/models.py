"""
Enumerations shared by the job model.
"""

from enum import Enum


class Granularity(Enum):
    """Time bucket at which a timeseries is sampled"""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def minutes(self) -> int:
        """Length of one bucket in minutes"""
        return GRANULARITY_MINUTES[self]

    @classmethod
    def lookup(cls, value: str | None) -> "Granularity | None":
        """Find the granularity for a stored value, or None if unrecognized"""
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


GRANULARITY_MINUTES = {
    Granularity.MINUTE: 1,
    Granularity.HOUR: 60,
    Granularity.DAY: 1440,
    Granularity.WEEK: 10080,
    Granularity.MONTH: 43800,  # 730 hours
}


class JobStatus(Enum):
    """Known job status values.

    A record stores its status as plain text, so values outside this
    enumeration are kept as-is.
    """

    CREATED = "CREATED"
    RUNNING = "RUNNING"
    NODATA = "NODATA"
    STOPPED = "STOPPED"
    ERROR = "ERROR"


class TimeseriesFramework(Enum):
    EGADS = "Egads"
    PROPHET = "Prophet"


class TimeseriesModel(Enum):
    OLYMPIC_MODEL = "OlympicModel"
    MOVING_AVERAGE_MODEL = "MovingAverageModel"
    NAIVE_FORECASTING_MODEL = "NaiveForecastingModel"
    REGRESSION_MODEL = "RegressionModel"
    SPECTRAL_SMOOTHER = "SpectralSmoother"


class AnomalyDetectionModel(Enum):
    KSIGMA_MODEL = "KSigmaModel"
    DBSCAN_MODEL = "DBScanModel"
    EXTREME_LOW_DENSITY_MODEL = "ExtremeLowDensityModel"


class ProphetGrowthModel(Enum):
    LINEAR = "linear"
    LOGISTIC = "logistic"


class ProphetSeasonality(Enum):
    AUTO = "auto"
    TRUE = "true"
    FALSE = "false"


DEFAULT_TIMESERIES_FRAMEWORK = TimeseriesFramework.EGADS.value
DEFAULT_TIMESERIES_MODEL = TimeseriesModel.OLYMPIC_MODEL.value
DEFAULT_ANOMALY_DETECTION_MODEL = AnomalyDetectionModel.KSIGMA_MODEL.value
DEFAULT_PROPHET_GROWTH_MODEL = ProphetGrowthModel.LINEAR.value
DEFAULT_PROPHET_SEASONALITY = ProphetSeasonality.AUTO.value
