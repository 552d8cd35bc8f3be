# movie_catalog/storage.py
import os
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from movie_catalog.core.config import settings
from movie_catalog.core.errors import BlobError, NotFound


class BlobStore(ABC):
    """Immutable image payloads keyed by generated names."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> None:
        """Store `data` under a key that must not exist yet."""
        pass

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the payload for `key`. Raise 'NotFound' if there is none."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class FileSystemBlobStore(BlobStore):
    """
    One file per key under `root`. Every call is bounded by `timeout`, and at
    most `max_workers` calls are in flight, so a stuck volume surfaces as a
    'BlobError' instead of a hung request or a growing backlog.
    """

    def __init__(self, root: Union[str, Path], timeout: float = 30.0, max_workers: int = 4):
        self.root = Path(root)
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="blob")
        self._slots = threading.BoundedSemaphore(max_workers)

    def _path(self, key: str) -> Path:
        if not key or key in (".", "..") or "/" in key or "\\" in key or "\0" in key:
            raise NotFound("Image not found")
        return self.root / key

    def _call(self, operation: str, key: str, fn, *args, on_abandon: Optional[Callable[[Future], None]] = None):
        if not self._slots.acquire(timeout=self.timeout):
            logger.error("Blob {} of {} rejected, all storage workers busy", operation, key)
            raise BlobError(f"Storage {operation} timed out")
        future = self._executor.submit(fn, *args)
        future.add_done_callback(lambda _: self._slots.release())
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout as exc:
            # a write that already started still finishes; undo it once it does
            if not future.cancel() and on_abandon is not None:
                future.add_done_callback(on_abandon)
            logger.error("Blob {} of {} timed out after {}s", operation, key, self.timeout)
            raise BlobError(f"Storage {operation} timed out") from exc
        except FileNotFoundError as exc:
            raise NotFound("Image not found") from exc
        except OSError as exc:
            logger.error("Blob {} of {} failed: {}", operation, key, exc)
            raise BlobError(f"Storage {operation} failed") from exc

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # "x" refuses to replace an existing object
        with open(path, "xb") as dst:
            dst.write(data)

    @staticmethod
    def _remove_late_write(key: str, path: Path, future: Future) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.error("Could not remove late upload of {}: {}", key, exc)
        else:
            logger.warning("Removed late upload of {} after its caller timed out", key)

    def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        self._call(
            "upload", key, self._write, path, data,
            on_abandon=lambda future: self._remove_late_write(key, path, future),
        )

    def get(self, key: str) -> bytes:
        return self._call("download", key, self._path(key).read_bytes)

    def delete(self, key: str) -> None:
        self._call("delete", key, os.remove, self._path(key))


blob_store = FileSystemBlobStore(settings.BLOB_DIR, timeout=settings.BLOB_TIMEOUT_SECONDS)

def get_blob_store() -> BlobStore:
    return blob_store
