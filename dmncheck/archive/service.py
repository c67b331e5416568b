"""Batch validation of DMN documents and ZIP archives.

Each document is verified on its own, possibly in a worker thread, and
produces its own result. A failure in one document becomes an ERROR result
for that document; the rest of the batch is unaffected. Results are returned
in input (archive) order.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from dmncheck.core.config import get_settings
from dmncheck.tables import DmnCheckError
from dmncheck.verification import DmnVerifier, ValidationResult, failure_result

logger = logging.getLogger(__name__)


class ArchiveError(DmnCheckError):
    """The uploaded archive could not be opened."""


@dataclass(frozen=True)
class ArchiveEntry:
    """A document taken from an archive, or the reason it could not be read."""

    name: str
    data: bytes | None = None
    error: str | None = None


def read_archive(data: bytes, extension: str = ".dmn") -> list[ArchiveEntry]:
    """List the DMN entries of a ZIP archive in archive order.

    Raises:
        ArchiveError: ``data`` is not a ZIP archive.
    """
    suffix = extension.lower()
    entries = []
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            for info in archive.infolist():
                if info.is_dir() or not info.filename.lower().endswith(suffix):
                    continue
                try:
                    entries.append(ArchiveEntry(name=info.filename, data=archive.read(info)))
                except (
                    zipfile.BadZipFile, zlib.error, OSError,
                    RuntimeError, ValueError,  # encrypted or damaged entries
                ) as e:
                    logger.warning("Could not read archive entry %s: %s", info.filename, e)
                    entries.append(ArchiveEntry(name=info.filename, error=str(e)))
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Not a readable ZIP archive: {e}") from e
    return entries


class BatchValidator:
    """Verifies many documents with a thread pool."""

    def __init__(
        self,
        verifier: DmnVerifier | None = None,
        max_workers: int | None = None,
        document_timeout: float | None = None,
    ):
        settings = get_settings()
        self.verifier = verifier or DmnVerifier()
        self.max_workers = max_workers if max_workers is not None else settings.max_workers
        self.document_timeout = (
            document_timeout if document_timeout is not None
            else settings.document_timeout_seconds
        )

    def validate_archive(self, data: bytes, extension: str | None = None) -> list[ValidationResult]:
        """Verify every DMN entry of a ZIP archive."""
        entries = read_archive(data, extension or get_settings().dmn_extension)
        logger.info("Archive contains %d DMN documents", len(entries))
        return self.validate_entries(entries)

    def validate_documents(self, documents: list[tuple[str, bytes]]) -> list[ValidationResult]:
        """Verify ``(name, bytes)`` pairs, returning results in the same order."""
        return self.validate_entries([ArchiveEntry(name=name, data=data) for name, data in documents])

    def validate_entries(self, entries: list[ArchiveEntry]) -> list[ValidationResult]:
        sequential = self.max_workers <= 1 or len(entries) <= 1
        # A deadline needs a pool even for a single document
        if not entries or (sequential and self.document_timeout is None):
            results = [self._verify_entry(entry) for entry in entries]
        else:
            results = self._verify_parallel(entries)

        invalid = sum(1 for result in results if not result.is_valid)
        logger.info("Validated %d documents, %d invalid", len(results), invalid)
        return results

    def _verify_parallel(self, entries: list[ArchiveEntry]) -> list[ValidationResult]:
        pool = ThreadPoolExecutor(max_workers=max(1, self.max_workers), thread_name_prefix="dmncheck")
        timed_out = False
        try:
            futures: list[Future] = [pool.submit(self._verify_entry, entry) for entry in entries]
            results = []
            for entry, future in zip(entries, futures):
                try:
                    results.append(future.result(timeout=self.document_timeout))
                except FutureTimeoutError:
                    timed_out = True
                    future.cancel()
                    logger.warning("Validation of %s exceeded %ss", entry.name, self.document_timeout)
                    results.append(failure_result(
                        entry.name,
                        f"Validation of {entry.name} exceeded the "
                        f"{self.document_timeout:g} second deadline.",
                    ))
            return results
        finally:
            pool.shutdown(wait=not timed_out, cancel_futures=timed_out)

    def _verify_entry(self, entry: ArchiveEntry) -> ValidationResult:
        if entry.error is not None or entry.data is None:
            return failure_result(
                entry.name,
                f"Could not read {entry.name} from archive: {entry.error or 'no data'}",
            )
        try:
            return self.verifier.verify_bytes(entry.name, entry.data)
        except Exception as e:
            logger.exception("Unexpected error while validating %s", entry.name)
            return failure_result(entry.name, f"Unexpected error while validating {entry.name}: {e}")


def validate_archive(data: bytes, max_workers: int | None = None) -> list[ValidationResult]:
    """Convenience function to verify every DMN document in a ZIP archive."""
    return BatchValidator(max_workers=max_workers).validate_archive(data)


def validate_documents(
    documents: list[tuple[str, bytes]],
    max_workers: int | None = None,
) -> list[ValidationResult]:
    """Convenience function to verify a list of ``(name, bytes)`` documents."""
    return BatchValidator(max_workers=max_workers).validate_documents(documents)
