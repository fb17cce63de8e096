"""
Artifact writer — atomic replacement of the generated file.

Adapter layer — implements the BundleWriter port.

Uses an ATOMIC REPLACE pattern:
  1. Write the full text to a temporary file in the target directory
  2. Set its mode to 0644
  3. os.replace() it over the target (atomic on POSIX within one filesystem)
  4. On any failure, remove the temporary file → the old artifact stays intact

A reader never observes a half-written generated file.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import structlog
from railway import ErrorCode
from railway.result import Result

log = structlog.get_logger()

_ARTIFACT_MODE = 0o644


class AtomicFileBundleWriter:
    """
    Write the generated artifact to `path`, replacing it atomically.

    Implements the BundleWriter port.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def write(self, source: str) -> Result[Path]:
        """
        Replace the artifact with `source`.

        Returns Result[Path] with the written path on success,
        or Result.failure(OUTPUT_WRITE_ERROR, ...) — the previous file untouched.
        """
        return Result.from_computation(
            lambda: self._replace(source),
            ErrorCode.OUTPUT_WRITE_ERROR,
            f"Failed to write {self._path}",
        )

    def _replace(self, source: str) -> Path:
        directory = self._path.parent
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(source)
            tmp_path.chmod(_ARTIFACT_MODE)
            os.replace(tmp_path, self._path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

        log.info("bundle.written", path=str(self._path), size_bytes=len(source.encode("utf-8")))
        return self._path
