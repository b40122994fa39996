"""Conversion manager: job bookkeeping around a single GifConverter."""

import logging
import threading
import uuid
from datetime import UTC, datetime
from pathlib import Path

from momentgif.models.capture import Capture
from momentgif.models.errors import ConversionCancelled, MomentGifError, ValidationError
from momentgif.models.job import ConversionStage, ConversionState
from momentgif.models.options import ConversionOptions
from momentgif.pipeline.converter import GifConverter

logger = logging.getLogger(__name__)

TERMINAL_STAGES = {ConversionStage.DONE, ConversionStage.FAILED, ConversionStage.CANCELLED}


class ConversionManager:
    """Tracks conversion jobs and runs them one after another on one converter."""

    def __init__(self, converter: GifConverter | None = None):
        self.converter = converter or GifConverter()
        self._jobs: dict[str, ConversionState] = {}
        self._cancel_events: dict[str, threading.Event] = {}
        self._run_lock = threading.Lock()

    def list_captures(self) -> list[Capture]:
        return self.converter.library.list_captures()

    def create_job(
        self, capture_id: str, options: ConversionOptions | None = None
    ) -> ConversionState:
        """Create a new conversion job."""
        if self.converter.library.get_capture(capture_id) is None:
            raise ValidationError(f"Capture {capture_id} not found")
        job_id = str(uuid.uuid4())
        now = datetime.now(UTC)
        state = ConversionState(
            job_id=job_id,
            capture_id=capture_id,
            options=options or ConversionOptions.from_settings(),
            message="Queued",
            started_at=now,
            updated_at=now,
        )
        self._jobs[job_id] = state
        self._cancel_events[job_id] = threading.Event()
        return state

    def get_job_state(self, job_id: str) -> ConversionState | None:
        """Get current state of a job."""
        return self._jobs.get(job_id)

    def cancel_job(self, job_id: str) -> bool:
        """Ask a queued or running job to stop. False if unknown or already finished."""
        if job_id not in self._jobs or self._jobs[job_id].stage in TERMINAL_STAGES:
            return False
        self._cancel_events[job_id].set()
        if self._jobs[job_id].stage == ConversionStage.IDLE:
            self._update_state(job_id, ConversionStage.CANCELLED, message="Job cancelled")
        return True

    def process(self, job_id: str) -> ConversionState:
        """Run a job's conversion. Jobs queue behind each other.

        Conversion errors are recorded on the returned state, not raised.
        """
        if job_id not in self._jobs:
            raise ValidationError(f"Job {job_id} not found")

        with self._run_lock:
            state = self._jobs[job_id]
            cancel_event = self._cancel_events[job_id]
            if cancel_event.is_set():
                self._update_state(job_id, ConversionStage.CANCELLED, message="Job cancelled")
                return state

            self._update_state(job_id, ConversionStage.RESOLVING, 0.0, "Fetching video...")

            def on_progress(progress: float):
                self._update_state(
                    job_id,
                    ConversionStage.SAMPLING,
                    progress,
                    f"Converting: {progress * 100:.0f}%",
                )

            try:
                result = self.converter.convert(
                    state.capture_id,
                    state.options,
                    on_progress=on_progress,
                    cancel_event=cancel_event,
                )
            except ConversionCancelled:
                self._update_state(job_id, ConversionStage.CANCELLED, message="Job cancelled")
                return state
            except MomentGifError as e:
                state.error_type = type(e).__name__
                self._update_state(job_id, ConversionStage.FAILED, message=e.message)
                return state

            state.result = result
            state.output_path = result.output_path
            state.completed_at = datetime.now(UTC)
            self._update_state(job_id, ConversionStage.DONE, 1.0, "Conversion complete!")
            return state

    def persist(self, job_id: str) -> ConversionState:
        """Save a finished job's GIF to the library. Raises PersistFailed on failure."""
        state = self._jobs.get(job_id)
        if not state:
            raise ValidationError(f"Job {job_id} not found")
        if state.stage != ConversionStage.DONE or not state.output_path:
            raise ValidationError(f"Job is not complete (current stage: {state.stage.value})")

        saved = self.converter.persist(Path(state.output_path))
        state.saved_path = str(saved)
        state.message = "Saved to library"
        state.updated_at = datetime.now(UTC)
        return state

    def delete_job_data(self, job_id: str) -> None:
        """Delete a job and its output file."""
        state = self._jobs.pop(job_id, None)
        self._cancel_events.pop(job_id, None)
        if state and state.output_path:
            self.converter.temp_store.remove(Path(state.output_path))
            logger.info(f"Deleted output of job {job_id}")

    def _update_state(
        self,
        job_id: str,
        stage: ConversionStage,
        progress: float | None = None,
        message: str = "",
    ):
        """Update job state."""
        if job_id in self._jobs:
            state = self._jobs[job_id]
            state.stage = stage
            if progress is not None:
                state.progress = progress
            state.message = message
            state.updated_at = datetime.now(UTC)
            if stage == ConversionStage.FAILED:
                state.error = message
