"""Celery task definitions."""

from celery import Celery

from momentgif.config import get_settings
from momentgif.models.options import ConversionOptions

settings = get_settings()

celery_app = Celery(
    "momentgif",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
)


@celery_app.task(bind=True, name="momentgif.convert_capture")
def convert_capture_task(
    self,
    capture_id: str,
    options: dict | None = None,
    persist: bool = False,
):
    """Celery task wrapping GifConverter.convert()."""
    from momentgif.models.errors import MomentGifError, PersistFailed
    from momentgif.pipeline.converter import GifConverter

    converter = GifConverter()
    opts = ConversionOptions(**(options or {}))

    def on_progress(progress: float):
        self.update_state(state="PROGRESS", meta={"progress": progress})

    try:
        result = converter.convert(capture_id, opts, on_progress=on_progress)
    except MomentGifError as e:
        return {
            "capture_id": capture_id,
            "status": "failed",
            "error": e.message,
            "error_type": type(e).__name__,
        }

    response = {
        "capture_id": capture_id,
        "status": "done",
        "output_path": result.output_path,
        "frames_written": result.frames_written,
        "skipped_frames": result.skipped_frames,
        "failed_appends": result.failed_appends,
    }
    if persist:
        try:
            response["saved_path"] = str(converter.persist(result.output_path))
        except PersistFailed as e:
            response["status"] = "persist_failed"
            response["error"] = e.message
            response["error_type"] = type(e).__name__
    return response
