"""Tests for ProcessingService."""

import pytest


@pytest.fixture
def processing_service(store, audit):
    from core.services.processing_service import ProcessingService
    return ProcessingService(store, audit)


@pytest.fixture
def job(processing_service):
    from core.models import ProcessingJobType

    return processing_service.submit(ProcessingJobType.ENHANCEMENT, ["bride.jpg"])[0]


class TestSubmit:

    def test_one_job_per_file(self, processing_service):
        from core.models import ProcessingJobStatus, ProcessingJobType

        jobs = processing_service.submit(ProcessingJobType.BACKGROUND_REMOVAL, ["a.jpg", "b.png"])

        assert [j.file_name for j in jobs] == ["a.jpg", "b.png"]
        assert all(j.status == ProcessingJobStatus.PROCESSING for j in jobs)
        assert all(j.progress == 0 for j in jobs)
        assert len(processing_service.list_all()) == 2


class TestProgress:

    def test_partial_progress(self, processing_service, job):
        from core.models import ProcessingJobStatus

        updated = processing_service.record_progress(job.id, 40)

        assert updated.progress == 40
        assert updated.status == ProcessingJobStatus.PROCESSING
        assert updated.completed_at is None

    def test_reaching_100_completes(self, processing_service, job):
        from core.models import ProcessingJobStatus

        updated = processing_service.record_progress(job.id, 100)

        assert updated.status == ProcessingJobStatus.COMPLETED
        assert updated.completed_at is not None

    @pytest.mark.parametrize("reported, stored", [(-5, 0), (250, 100)])
    def test_progress_clamped(self, processing_service, job, reported, stored):
        assert processing_service.record_progress(job.id, reported).progress == stored

    @pytest.mark.parametrize("reported", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_progress_rejected(self, processing_service, job, store, reported):
        from core.models import Customer
        from utils.timezone import now_utc

        with store.mutate() as studio:
            studio.customers.append(
                Customer(id="c1", name="Asha", phone="1", created_at=now_utc())
            )

        with pytest.raises(ValueError, match="finite"):
            processing_service.record_progress(job.id, reported)

        studio = store.load()
        assert [c.name for c in studio.customers] == ["Asha"]
        assert processing_service.get_by_id(job.id).progress == 0

    def test_finished_job_rejects_updates(self, processing_service, job):
        processing_service.record_progress(job.id, 100)

        with pytest.raises(ValueError, match="already completed"):
            processing_service.record_progress(job.id, 50)

    def test_missing_job(self, processing_service):
        assert processing_service.record_progress("missing", 10) is None
        assert processing_service.mark_failed("missing") is None


class TestFailAndList:

    def test_mark_failed(self, processing_service, job):
        from core.models import ProcessingJobStatus

        failed = processing_service.mark_failed(job.id)

        assert failed.status == ProcessingJobStatus.FAILED
        assert processing_service.get_by_id(job.id).status == ProcessingJobStatus.FAILED

    def test_list_filters(self, processing_service, job):
        from core.models import ProcessingJobStatus, ProcessingJobType

        processing_service.submit(ProcessingJobType.FACE_DETECTION, ["group.jpg"])
        processing_service.mark_failed(job.id)

        assert len(processing_service.list_all(status=ProcessingJobStatus.FAILED)) == 1
        assert len(processing_service.list_all(job_type=ProcessingJobType.FACE_DETECTION)) == 1
