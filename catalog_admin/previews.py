"""Local file staging with data-URL previews.

Files picked for upload are staged as ``StagedFile`` records that keep the
binary and its preview together, so removing one entry can never leave a
preview attached to the wrong file. Previews are rendered on a small thread
pool; each one lands on its own record whatever order they finish in.
"""

import base64
import mimetypes
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from catalog_admin.config import MAX_UPLOAD_SIZE, PREVIEW_MAX_DIMENSION, PREVIEW_WORKERS
from catalog_admin.errors import FileTooLargeError
from catalog_admin.http_client import FilesList
from catalog_admin.logging_config import get_logger
from catalog_admin.urls import resolve_media_url

__all__ = [
    "LocalFile",
    "StagedFile",
    "FilePreviewAdapter",
    "ThumbnailSlot",
    "make_preview",
]

logger = get_logger("previews")


@dataclass(frozen=True)
class LocalFile:
    """A file selected on this machine, held in memory until upload."""

    name: str
    content: bytes = field(repr=False)
    mime_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def identity(self) -> Tuple[str, int]:
        """Two selections are the same file when name and size match."""
        return (self.name, self.size)

    @classmethod
    def from_path(cls, path: Union[Path, str]) -> "LocalFile":
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )


@dataclass
class StagedFile:
    """A staged file and its preview (None until rendered)."""

    file: LocalFile
    preview: Optional[str] = None
    error: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self.preview is not None or self.error is not None


def _data_url(mime_type: str, content: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def make_preview(file: LocalFile, max_dimension: int = PREVIEW_MAX_DIMENSION) -> str:
    """Render a displayable data URL for a local file.

    Images are downscaled to fit ``max_dimension`` and re-encoded as PNG.
    Anything Pillow cannot open is embedded as-is.
    """
    if not file.mime_type.startswith("image/"):
        return _data_url(file.mime_type, file.content)

    try:
        from PIL import Image

        img = Image.open(BytesIO(file.content))
        img.load()
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA")
        img.thumbnail((max_dimension, max_dimension))

        output = BytesIO()
        img.save(output, format="PNG")
        return _data_url("image/png", output.getvalue())
    except Exception as e:
        logger.debug(f"Could not render image preview for {file.name}: {e}")
        return _data_url(file.mime_type, file.content)


class FilePreviewAdapter:
    """Ordered collection of staged files with background preview rendering.

    Usage:
        with FilePreviewAdapter() as media:
            media.stage([LocalFile.from_path("a.jpg"), LocalFile.from_path("b.jpg")])
            media.wait()
            for staged in media.files:
                print(staged.file.name, staged.preview[:30])
    """

    def __init__(
        self,
        max_size: int = MAX_UPLOAD_SIZE,
        max_workers: int = PREVIEW_WORKERS,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.max_size = max_size
        self._executor = executor
        self._owns_executor = executor is None
        self._max_workers = max_workers
        self._files: List[StagedFile] = []
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

    def __enter__(self) -> "FilePreviewAdapter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._files)

    @property
    def files(self) -> List[StagedFile]:
        with self._lock:
            return list(self._files)

    @property
    def previews(self) -> List[Optional[str]]:
        return [staged.preview for staged in self.files]

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="preview"
            )
        return self._executor

    def _render(self, staged: StagedFile) -> None:
        try:
            staged.preview = make_preview(staged.file)
        except Exception as e:
            logger.warning(f"Preview failed for {staged.file.name}: {e}")
            staged.error = str(e)

    def stage(self, files: Iterable[LocalFile]) -> List[StagedFile]:
        """Stage new files, skipping any already staged (same name and size).

        Raises:
            FileTooLargeError: If any file exceeds the size limit; nothing is staged

        Returns:
            The newly staged records, in selection order
        """
        batch = list(files)
        for f in batch:
            if f.size > self.max_size:
                raise FileTooLargeError(f.name, f.size, self.max_size)

        added: List[StagedFile] = []
        with self._lock:
            seen = {staged.file.identity for staged in self._files}
            for f in batch:
                if f.identity in seen:
                    logger.debug(f"Skipping duplicate file {f.name} ({f.size} bytes)")
                    continue
                seen.add(f.identity)
                staged = StagedFile(file=f)
                self._files.append(staged)
                added.append(staged)

        executor = self._get_executor()
        for staged in added:
            future = executor.submit(self._render, staged)
            with self._lock:
                self._pending.add(future)
            future.add_done_callback(self._discard_future)
        return added

    def _discard_future(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until all pending previews are rendered.

        Returns:
            True if nothing is left pending
        """
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)
        return all(future.done() for future in pending)

    def remove(self, index: int) -> StagedFile:
        """Remove the staged file at ``index`` along with its preview."""
        with self._lock:
            return self._files.pop(index)

    def clear(self) -> None:
        with self._lock:
            self._files.clear()

    def to_parts(self, field_name: str) -> FilesList:
        """Multipart parts for every staged file under ``field_name``."""
        return [
            (field_name, (staged.file.name, staged.file.content, staged.file.mime_type))
            for staged in self.files
        ]

    def close(self) -> None:
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=True)
            self._executor = None


class ThumbnailSlot(FilePreviewAdapter):
    """A single-file slot; selecting a new file replaces the old one.

    While editing, ``existing_url`` shows the thumbnail already on the
    server until a replacement is selected.
    """

    def __init__(self, existing_url: str = "", **kwargs):
        super().__init__(**kwargs)
        self.existing_url = existing_url

    def select(self, file: LocalFile) -> StagedFile:
        if file.size > self.max_size:
            raise FileTooLargeError(file.name, file.size, self.max_size)
        self.clear()
        return self.stage([file])[0]

    @property
    def file(self) -> Optional[LocalFile]:
        files = self.files
        return files[0].file if files else None

    @property
    def preview(self) -> str:
        files = self.files
        if files and files[0].preview:
            return files[0].preview
        return resolve_media_url(self.existing_url)

    def reset(self, existing_url: str = "") -> None:
        self.clear()
        self.existing_url = existing_url
