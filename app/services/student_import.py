"""Bulk student import from CSV."""

import csv
import io
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import BadFormatError, InternalError
from app.models.student import Student
from app.schemas.student import StudentBase, StudentImportError, StudentImportResult

logger = logging.getLogger(__name__)

# CSV header columns for student import
STUDENT_CSV_COLUMNS = ["studentID", "name", "class", "gender", "dob"]

# Keeps IN (...) lists well under driver parameter limits
EXISTENCE_CHECK_CHUNK = 1000

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@contextmanager
def staged_upload(content: bytes, upload_dir: str | None = None) -> Iterator[str]:
    """Write an uploaded file to a temporary path that is always removed."""
    upload_dir = upload_dir or settings.UPLOAD_DIR
    os.makedirs(upload_dir, exist_ok=True)
    fd, path = tempfile.mkstemp(prefix="students-", suffix=".csv", dir=upload_dir)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        logger.debug(f"[IMPORT] Removed staged upload {path}")


def parse_student_csv(content: bytes) -> list[tuple[int, dict[str, Any]]]:
    """Parse CSV bytes into (line number, row) pairs.

    Raises BadFormatError for anything structurally wrong with the file.
    Blank lines are dropped; per-row value problems are left to validation.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise BadFormatError("Invalid CSV format", details={"reason": "File is not UTF-8 encoded"})

    if not text.strip():
        return []

    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    rows: list[tuple[int, dict[str, Any]]] = []
    try:
        headers = [h.strip() for h in reader.fieldnames or []]
        missing = [c for c in STUDENT_CSV_COLUMNS if c not in headers]
        if missing:
            raise BadFormatError(
                "Invalid CSV format",
                details={"reason": "Missing required columns", "missing_columns": missing},
            )
        reader.fieldnames = headers
        logger.debug(f"[IMPORT] Detected headers: {headers}")

        for row in reader:
            values = [v for k, v in row.items() if k is not None]
            if not any(isinstance(v, str) and v.strip() for v in values):
                continue
            rows.append((reader.line_num, row))
    except csv.Error as e:
        raise BadFormatError(
            "Invalid CSV format",
            details={"reason": str(e), "line": reader.line_num},
        )

    logger.info(f"[IMPORT] Parsed {len(rows)} data rows from CSV")
    return rows


def _describe_validation_error(error: PydanticValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err["loc"])
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


class StudentImportService:
    """Imports students from CSV, skipping IDs that already exist."""

    def __init__(self, db: Session):
        self.db = db

    def import_upload(
        self,
        content: bytes,
        upload_dir: str | None = None,
    ) -> StudentImportResult:
        """Stage an uploaded CSV on disk, import it, and remove the file."""
        with staged_upload(content, upload_dir) as path:
            return self.import_file(path)

    def import_file(self, path: str) -> StudentImportResult:
        """Import students from a CSV file on disk."""
        with open(path, "rb") as fh:
            content = fh.read()
        logger.info(f"[IMPORT] Starting import from {path} ({len(content)} bytes)")
        rows = parse_student_csv(content)
        return self.import_rows(rows)

    def import_rows(self, rows: list[tuple[int, dict[str, Any]]]) -> StudentImportResult:
        """Validate, classify and insert parsed rows."""
        candidates: list[StudentBase] = []
        errors: list[StudentImportError] = []

        for row_num, row in rows:
            extra = row.get(None)
            if extra:
                errors.append(StudentImportError(
                    row=row_num,
                    student_id=(row.get("studentID") or "").strip() or None,
                    message=f"Row has {len(extra)} more value(s) than the header",
                ))
                continue
            try:
                candidates.append(StudentBase.model_validate(
                    {column: row.get(column) for column in STUDENT_CSV_COLUMNS}
                ))
            except PydanticValidationError as e:
                message = _describe_validation_error(e)
                logger.warning(f"[IMPORT] Row {row_num} FAILED - {message}")
                errors.append(StudentImportError(
                    row=row_num,
                    student_id=(row.get("studentID") or "").strip() or None,
                    message=message,
                ))

        existing = self._existing_student_ids([c.student_id for c in candidates])

        batch: list[StudentBase] = []
        skipped: list[str] = []
        seen: set[str] = set()
        for candidate in candidates:
            if candidate.student_id in existing or candidate.student_id in seen:
                skipped.append(candidate.student_id)
                continue
            seen.add(candidate.student_id)
            batch.append(candidate)

        inserted = self._insert_batch(batch)

        # Rows that lost a race against a concurrent insert of the same ID
        for candidate in batch:
            if candidate.student_id not in inserted:
                skipped.append(candidate.student_id)

        message = f"{len(inserted)} students imported. {len(skipped)} skipped."
        if errors:
            message += f" {len(errors)} rows failed."
        logger.info(f"[IMPORT] Complete - {message}")

        return StudentImportResult(
            imported_count=len(inserted),
            skipped_count=len(skipped),
            skipped_ids=skipped,
            failed_count=len(errors),
            errors=errors,
            message=message,
        )

    def _existing_student_ids(self, student_ids: list[str]) -> set[str]:
        existing: set[str] = set()
        unique_ids = list(dict.fromkeys(student_ids))
        for start in range(0, len(unique_ids), EXISTENCE_CHECK_CHUNK):
            chunk = unique_ids[start:start + EXISTENCE_CHECK_CHUNK]
            result = self.db.execute(
                select(Student.student_id).where(Student.student_id.in_(chunk))
            )
            existing.update(result.scalars().all())
        return existing

    def _insert_batch(self, batch: list[StudentBase]) -> set[str]:
        """Insert the batch in one statement; conflicting IDs are left out."""
        if not batch:
            return set()

        dialect = self.db.get_bind().dialect.name
        make_insert = _UPSERT_INSERTS.get(dialect)
        if make_insert is None:
            raise InternalError(f"Bulk import is not supported on '{dialect}'")

        stmt = (
            make_insert(Student)
            .on_conflict_do_nothing(index_elements=[Student.student_id])
            .returning(Student.student_id)
        )
        params = [
            {
                "student_id": c.student_id,
                "name": c.name,
                "class_name": c.class_name,
                "gender": c.gender,
                "dob": c.dob,
            }
            for c in batch
        ]
        try:
            result = self.db.scalars(stmt, params)
            inserted = set(result.all())
        except SQLAlchemyError:
            logger.exception("[IMPORT] Bulk insert failed")
            raise InternalError("Failed to import students")
        return inserted
