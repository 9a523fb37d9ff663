"""AI photo-processing job models. Processing itself is simulated."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from core.models.base import StudioModel


class ProcessingJobType(str, Enum):
    """Which AI tool the job runs."""

    BACKGROUND_REMOVAL = "background_removal"
    FACE_DETECTION = "face_detection"
    ENHANCEMENT = "enhancement"


class ProcessingJobStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ProcessingJobCreate(StudioModel):
    """Files to queue for one tool. One job is created per file."""

    type: ProcessingJobType
    file_names: list[str] = Field(..., min_length=1)


class AIProcessingJob(StudioModel):
    """Full processing job as stored."""

    id: str
    type: ProcessingJobType
    file_name: str
    status: ProcessingJobStatus = ProcessingJobStatus.PROCESSING
    progress: float = Field(0, ge=0, le=100, allow_inf_nan=False)
    created_at: datetime
    completed_at: datetime | None = None
