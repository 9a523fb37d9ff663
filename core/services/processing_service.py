"""
Processing service for AI photo tools.

Tracks one job per uploaded file. The tools themselves run elsewhere (or are
simulated by the dashboard); this service only records progress reports.
"""

import logging
import math

from core.audit import AuditLogger, AuditAction
from core.models import AIProcessingJob, ProcessingJobStatus, ProcessingJobType
from core.store import StudioStore
from utils.ids import generate_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class ProcessingService:
    """Service for AI processing job operations."""

    def __init__(self, store: StudioStore, audit: AuditLogger):
        self.store = store
        self.audit = audit

    def submit(self, job_type: ProcessingJobType, file_names: list[str]) -> list[AIProcessingJob]:
        """
        Queue files for an AI tool.

        Args:
            job_type: Tool to run
            file_names: One job is created per file

        Returns:
            Created jobs, all processing at 0%
        """
        created_at = now_utc()
        jobs = [
            AIProcessingJob(
                id=generate_id(),
                type=job_type,
                file_name=file_name,
                created_at=created_at,
            )
            for file_name in file_names
        ]

        with self.store.mutate() as studio:
            studio.ai_processing_jobs.extend(jobs)

        for job in jobs:
            self.audit.log_change(
                entity_type="processing_job",
                entity_id=job.id,
                action=AuditAction.CREATE,
                changes={"created": job.model_dump(mode="json", exclude_none=True)}
            )

        logger.info(f"Queued {len(jobs)} {job_type.value} job(s)")
        return jobs

    def get_by_id(self, job_id: str) -> AIProcessingJob | None:
        return next((j for j in self.store.load().ai_processing_jobs if j.id == job_id), None)

    def _transition(self, job_id: str, **updates) -> AIProcessingJob | None:
        with self.store.mutate() as studio:
            for index, current in enumerate(studio.ai_processing_jobs):
                if current.id == job_id:
                    break
            else:
                return None

            if current.status != ProcessingJobStatus.PROCESSING:
                raise ValueError(f"Job {job_id} is already {current.status.value}")

            updated = AIProcessingJob.model_validate({**current.model_dump(), **updates})
            studio.ai_processing_jobs[index] = updated

        if updated.status != current.status:
            self.audit.log_change(
                entity_type="processing_job",
                entity_id=job_id,
                action=AuditAction.UPDATE,
                changes={"status": {"old": current.status.value, "new": updated.status.value}}
            )

        return updated

    def record_progress(self, job_id: str, progress: float) -> AIProcessingJob | None:
        """
        Report how far a job has got.

        Progress is clamped to 0-100. Reaching 100 completes the job.

        Returns:
            Updated job, or None if no such job

        Raises:
            ValueError: If progress is not a finite number, or the job
                already completed or failed
        """
        if not math.isfinite(progress):
            raise ValueError(f"Progress must be a finite number, got {progress}")
        progress = min(max(progress, 0), 100)
        updates = {"progress": progress}
        if progress >= 100:
            updates.update(status=ProcessingJobStatus.COMPLETED, completed_at=now_utc())
        return self._transition(job_id, **updates)

    def mark_failed(self, job_id: str) -> AIProcessingJob | None:
        """
        Mark a job as failed.

        Returns:
            Updated job, or None if no such job

        Raises:
            ValueError: If the job already completed or failed
        """
        return self._transition(
            job_id, status=ProcessingJobStatus.FAILED, completed_at=now_utc()
        )

    def list_all(
        self,
        status: ProcessingJobStatus | None = None,
        job_type: ProcessingJobType | None = None,
    ) -> list[AIProcessingJob]:
        """Jobs, newest first."""
        jobs = self.store.load().ai_processing_jobs
        if status is not None:
            jobs = [j for j in jobs if j.status == status]
        if job_type is not None:
            jobs = [j for j in jobs if j.type == job_type]
        return sorted(jobs, key=lambda j: j.created_at, reverse=True)
