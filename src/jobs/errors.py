"""
Exceptions raised by the job model and the job store.
"""


class JobError(Exception):
    """Base class for job model errors"""


class CopyError(JobError):
    """A job record could not be duplicated"""

    def __init__(self, job_id: int | None, reason: str):
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Could not copy job {job_id}: {reason}")


class InvalidScheduleState(JobError):
    """The record lacks what is needed to compute a schedule time"""


class JobNotFoundError(JobError, KeyError):
    """No stored job has the requested id"""

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class DisplayFormattingFailure(JobError):
    """A stored query could not be formatted for display"""


class QueryParameterError(ValueError):
    """A request parameter could not be converted to its field type"""

    def __init__(self, name: str, raw_value: str):
        self.name = name
        self.raw_value = raw_value
        super().__init__(f"Invalid value for {name}: {raw_value!r}")
