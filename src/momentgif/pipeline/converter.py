"""GIF converter: resolve -> sample + encode -> finalize, plus library persistence."""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from momentgif.config import get_settings
from momentgif.encoding.gif_encoder import GifEncoder
from momentgif.models.errors import (
    ConversionCancelled,
    ConverterBusy,
    MomentGifError,
    PersistFailed,
)
from momentgif.models.job import ConversionStage
from momentgif.models.options import ConversionOptions
from momentgif.models.result import ConversionResult
from momentgif.progress import ProgressReporter
from momentgif.sampling.sampler import FrameSampler
from momentgif.source.library import FileSystemLibrary, MediaLibrary
from momentgif.source.resolver import SourceHandle, SourceResolver
from momentgif.storage.library_sink import DirectoryLibrarySink, LibrarySink
from momentgif.storage.temp_store import TempFileManager

logger = logging.getLogger(__name__)


class GifConverter:
    """Converts the paired video of a Live Photo into a looping GIF.

    One instance runs one conversion at a time; a second concurrent
    ``convert`` call is rejected with ConverterBusy.
    """

    def __init__(
        self,
        library: MediaLibrary | None = None,
        sink: LibrarySink | None = None,
        temp_store: TempFileManager | None = None,
        resolver: SourceResolver | None = None,
        sampler: FrameSampler | None = None,
        encoder: GifEncoder | None = None,
        keep_source_files: bool | None = None,
    ):
        settings = get_settings()
        self.temp_store = temp_store or TempFileManager()
        self.library = library or FileSystemLibrary()
        self.resolver = resolver or SourceResolver(self.library, self.temp_store)
        self.sampler = sampler or FrameSampler()
        self.encoder = encoder or GifEncoder()
        self.sink = sink or DirectoryLibrarySink()
        self.keep_source_files = (
            settings.keep_source_files if keep_source_files is None else keep_source_files
        )
        self.stage = ConversionStage.IDLE
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def convert(
        self,
        capture_id: str,
        options: ConversionOptions | None = None,
        on_progress: Callable[[float], None] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ConversionResult:
        """Convert a capture to a GIF and return where it was written.

        Raises exactly one MomentGifError subclass on failure; no output path
        survives a failed or cancelled run.
        """
        if not self._lock.acquire(blocking=False):
            raise ConverterBusy(details={"capture_id": capture_id})
        try:
            return self._convert(
                capture_id, options or ConversionOptions(), on_progress, cancel_event
            )
        finally:
            self._lock.release()

    def _convert(
        self,
        capture_id: str,
        options: ConversionOptions,
        on_progress: Callable[[float], None] | None,
        cancel_event: threading.Event | None,
    ) -> ConversionResult:
        reporter = ProgressReporter(on_progress)
        self._set_stage(ConversionStage.RESOLVING, capture_id)
        try:
            source = self.resolver.resolve(capture_id)
            try:
                with source:
                    return self._encode(capture_id, source, options, reporter, cancel_event)
            finally:
                self._dispose_source(source)
        except ConversionCancelled:
            self._set_stage(ConversionStage.CANCELLED, capture_id)
            raise
        except MomentGifError as e:
            self._set_stage(ConversionStage.FAILED, capture_id)
            logger.error(f"Conversion of {capture_id} failed: {type(e).__name__}: {e.message}")
            raise
        except Exception:
            self._set_stage(ConversionStage.FAILED, capture_id)
            raise

    def _encode(
        self,
        capture_id: str,
        source: SourceHandle,
        options: ConversionOptions,
        reporter: ProgressReporter,
        cancel_event: threading.Event | None,
    ) -> ConversionResult:
        schedule = self.sampler.schedule(source.duration, options)
        output_path = self.temp_store.output_path()
        handle = self.encoder.open(
            output_path, schedule.frame_count, options.loop_count, colors=options.palette_size
        )

        self._set_stage(ConversionStage.SAMPLING, capture_id)
        try:
            report = self.sampler.sample(
                source,
                options,
                on_frame=lambda frame: self.encoder.append(handle, frame),
                on_progress=reporter,
                cancel_event=cancel_event,
            )
        except BaseException:
            self.encoder.abort(handle)
            raise

        self._set_stage(ConversionStage.FINALIZING, capture_id)
        self.encoder.finalize(handle)
        self._set_stage(ConversionStage.DONE, capture_id)

        width, height = handle.size
        return ConversionResult(
            capture_id=capture_id,
            output_path=str(output_path),
            frame_count=schedule.frame_count,
            frames_written=handle.frames_written,
            skipped_frames=report.skipped,
            failed_appends=handle.failed_appends,
            frame_rate=options.frame_rate,
            loop_count=options.loop_count,
            width=width,
            height=height,
            file_size_bytes=output_path.stat().st_size,
        )

    def persist(self, path: Path | str) -> Path:
        """Save a finished GIF to the photo library. The file itself is left untouched."""
        path = Path(path)
        if not path.is_file():
            raise PersistFailed(f"No GIF to save at {path}", details={"path": str(path)})
        try:
            saved = self.sink.save(path)
        except Exception as e:
            raise PersistFailed(
                f"Failed to save GIF to library: {e}",
                details={"path": str(path), "error": str(e)},
            )
        logger.info("Persisted %s as %s", path, saved)
        return saved

    def _dispose_source(self, source: SourceHandle) -> None:
        source.release()
        if not self.keep_source_files:
            self.temp_store.remove(source.path)

    def _set_stage(self, stage: ConversionStage, capture_id: str) -> None:
        self.stage = stage
        logger.info("Capture %s: %s", capture_id, stage.value)
