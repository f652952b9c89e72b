"""Pivots raw per-subject mark records into one scholarship report row per (student, exam)."""

from typing import Any, Callable, Collection, Dict, Iterable, List, Optional, Sequence, Tuple

import config
from core.models import CatalogEntry, MarkRecord, ReportInputs, ReportRow, Score, SubjectMark
from core.scores import format_score, validate_score
from utils.logger import get_logger

logger = get_logger()

ExamFilter = Callable[[CatalogEntry], bool]
RowKey = Tuple[str, str]  # (studentId, examId)

def scholarship_exam_filter(keyword: str = config.SCHOLARSHIP_EXAM_KEYWORD) -> ExamFilter:
    """Returns a predicate selecting exams whose name contains keyword, ignoring case."""
    needle = keyword.casefold()

    def is_scholarship_exam(exam: CatalogEntry) -> bool:
        return needle in str(exam.get("name") or "").casefold()

    return is_scholarship_exam

class _RowBuilder:
    """Accumulates one report row; the total moves with every appended subject."""

    def __init__(self, student_id: str, student_name: str, class_id: str, class_name: str,
                 exam_id: str, exam_name: str):
        self.student_id = student_id
        self.student_name = student_name
        self.class_id = class_id
        self.class_name = class_name
        self.exam_id = exam_id
        self.exam_name = exam_name
        self.marks: List[SubjectMark] = []
        self.total: Score = 0

    def has_subject(self, subject_name: str) -> bool:
        return any(mark.subject_name == subject_name for mark in self.marks)

    def add(self, subject_name: str, score: Score, total_marks: Optional[Score]) -> None:
        self.marks.append(SubjectMark(subject_name, score, total_marks))
        self.total += score

    def freeze(self) -> ReportRow:
        return ReportRow(
            student_id=self.student_id,
            student_name=self.student_name,
            class_id=self.class_id,
            class_name=self.class_name,
            exam_id=self.exam_id,
            exam_name=self.exam_name,
            marks=tuple(self.marks),
            total=self.total,
        )

def _name_map(entries: Iterable[CatalogEntry]) -> Dict[Any, str]:
    return {entry.get("id"): entry.get("name") for entry in entries}

def _exam_name_key(name: str) -> Tuple[str, str]:
    # Case-insensitive first, then the raw name so the order is total
    return (name.casefold(), name)

def aggregate(
    mark_records: Sequence[MarkRecord],
    classes: Sequence[CatalogEntry],
    subjects: Sequence[CatalogEntry],
    exams: Sequence[CatalogEntry],
    exam_filter: ExamFilter,
    subject_filter: Collection[str],
) -> List[ReportRow]:
    """Groups mark records into report rows keyed by (studentId, examId).

    Records whose exam is unknown or rejected by exam_filter are skipped, as
    are entries whose subject is unknown or not in subject_filter. A missing
    score counts as zero.

    Args:
        mark_records: Raw mark documents, one per (class, subject, exam).
        classes: Class catalog entries ({id, name}).
        subjects: Subject catalog entries ({id, name}).
        exams: Exam catalog entries ({id, name, totalMarks}).
        exam_filter: Predicate selecting qualifying exams.
        subject_filter: Subject display names to pivot into columns.

    Returns:
        Rows sorted by exam name ascending, then total descending.

    Raises:
        InvalidScore: If a present score is non-numeric or not finite.
    """
    class_map = _name_map(classes)
    subject_map = _name_map(subjects)
    exam_map = {exam.get("id"): exam for exam in exams if exam_filter(exam)}
    tracked_subjects = frozenset(subject_filter)

    builders: Dict[RowKey, _RowBuilder] = {}

    for record in mark_records:
        exam_id = record.get("examId")
        exam = exam_map.get(exam_id)
        if exam is None:
            logger.debug(f"Skipping mark record for exam {exam_id!r}: not a qualifying exam.")
            continue

        subject_id = record.get("subjectId")
        subject_name = subject_map.get(subject_id)
        if not subject_name or subject_name not in tracked_subjects:
            logger.debug(f"Skipping mark record for subject {subject_id!r} ({subject_name!r}): not tracked.")
            continue

        class_id = record.get("classId")
        for entry in record.get("marks") or []:
            student_id = entry.get("studentId")
            if student_id is None:
                logger.debug(f"Skipping entry without studentId in exam {exam_id!r}.")
                continue

            raw_score = entry.get("marks")
            score = 0 if raw_score is None else validate_score(raw_score, entry.get("studentName") or student_id)

            key: RowKey = (student_id, exam_id)
            builder = builders.get(key)
            if builder is None:
                builder = _RowBuilder(
                    student_id=student_id,
                    student_name=entry.get("studentName") or "",
                    class_id=class_id,
                    class_name=class_map.get(class_id) or config.UNKNOWN_CLASS_NAME,
                    exam_id=exam_id,
                    exam_name=str(exam.get("name") or ""),
                )
                builders[key] = builder
            elif builder.has_subject(subject_name):
                logger.warning(
                    f"Duplicate {subject_name!r} mark for student {student_id!r} in exam {exam_id!r}; keeping the first."
                )
                continue

            builder.add(subject_name, score, exam.get("totalMarks"))

    rows = [builder.freeze() for builder in builders.values()]
    rows.sort(key=lambda row: (_exam_name_key(row.exam_name), -row.total))
    logger.info(f"Aggregated {len(rows)} report rows from {len(mark_records)} mark records.")
    return rows

def build_scholarship_report(inputs: ReportInputs) -> List[ReportRow]:
    """Aggregates inputs with the fixed scholarship keyword and subject list."""
    return aggregate(
        inputs.marks,
        inputs.classes,
        inputs.subjects,
        inputs.exams,
        exam_filter=scholarship_exam_filter(),
        subject_filter=config.SCHOLARSHIP_SUBJECT_NAMES,
    )

def pivot_row(row: ReportRow, subject_names: Sequence[str] = config.SCHOLARSHIP_SUBJECT_NAMES) -> List[str]:
    """Display cells for one row: one per subject column (dash when absent), then the total."""
    cells = []
    for subject_name in subject_names:
        mark = row.mark_for(subject_name)
        cells.append(format_score(mark.score) if mark else config.MISSING_MARK_PLACEHOLDER)
    cells.append(format_score(row.total))
    return cells
