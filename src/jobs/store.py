"""
Redis storage for job records.
"""

import threading
from contextlib import contextmanager

import redis
import structlog

from src.core.redis_connection import RedisConnection

from .errors import JobNotFoundError
from .record import JobRecord
from .schema import record_from_mapping, record_to_mapping

logger = structlog.get_logger(__name__)


class JobStore:
    """Persists job records as Redis hashes.

    Writes to one job id are serialized with a per-id lock, and each write
    goes through a transactional pipeline so readers never observe a
    half-written record.
    """

    ID_COUNTER_KEY = "jobs:next_id"
    ID_SET_KEY = "jobs:ids"

    def __init__(self, connection: RedisConnection):
        self.connection = connection
        self.redis = connection.client
        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def save_job(self, job: JobRecord) -> int:
        """Write a job, assigning an id first if it has none

        Returns:
            The job id
        """
        if job.job_id is None:
            job.job_id = int(self.redis.incr(self.ID_COUNTER_KEY))
            logger.info("Assigned job id", job_id=job.job_id)
        with self._locked(job.job_id):
            self._write(job)
        return job.job_id

    def get_job(self, job_id: int) -> JobRecord:
        """Load a job by id

        Raises:
            JobNotFoundError: If no job is stored under the id
        """
        data = self.redis.hgetall(self._make_key(job_id))
        if not data:
            raise JobNotFoundError(job_id)
        return record_from_mapping(data)

    def delete_job(self, job_id: int) -> None:
        """Remove a job

        Raises:
            JobNotFoundError: If no job is stored under the id
        """
        with self._locked(job_id):
            pipe = self.redis.pipeline(transaction=True)
            pipe.delete(self._make_key(job_id))
            pipe.srem(self.ID_SET_KEY, job_id)
            deleted, _ = pipe.execute()
        if not deleted:
            raise JobNotFoundError(job_id)
        with self._locks_guard:
            self._locks.pop(job_id, None)
        logger.info("Job deleted", job_id=job_id)

    def list_job_ids(self) -> list[int]:
        return sorted(int(job_id) for job_id in self.redis.smembers(self.ID_SET_KEY))

    def list_jobs(self) -> list[JobRecord]:
        """Load every stored job, ordered by id"""
        jobs = []
        for job_id in self.list_job_ids():
            try:
                jobs.append(self.get_job(job_id))
            except JobNotFoundError:
                logger.warning("Job id listed but record missing", job_id=job_id)
        return jobs

    def update_job(self, job_id: int, newer: JobRecord) -> JobRecord:
        """Merge a newer version into the stored job and write it back

        Raises:
            JobNotFoundError: If no job is stored under the id
        """
        with self._locked(job_id):
            job = self.get_job(job_id)
            job.update(newer)
            self._write(job)
        logger.info("Job updated", job_id=job_id)
        return job

    def spawn_execution(self, job_id: int) -> JobRecord:
        """Copy a stored job as a template for a new execution

        Raises:
            JobNotFoundError: If no job is stored under the id
            CopyError: If the job cannot be duplicated
        """
        return JobRecord.copy_job(self.get_job(job_id))

    def _write(self, job: JobRecord):
        key = self._make_key(job.job_id)
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.delete(key)
            pipe.hset(key, mapping=record_to_mapping(job))
            pipe.sadd(self.ID_SET_KEY, job.job_id)
            pipe.execute()
            logger.debug("Job written to Redis", key=key)
        except redis.RedisError as e:
            logger.error("Failed to write job to Redis", key=key, error=str(e))
            raise

    @contextmanager
    def _locked(self, job_id: int):
        with self._locks_guard:
            lock = self._locks.setdefault(job_id, threading.Lock())
        with lock:
            yield

    def _make_key(self, job_id: int) -> str:
        """Generate Redis key"""
        return f"job:{job_id}"
