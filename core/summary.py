"""Ranks a class/subject cohort and renders the plain-text marks summary.

The summary is meant for plain-text messaging: asterisks mark bold text,
separators are rows of hyphens, and the table columns are padded with spaces.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import config
from core.models import MarkRecord, RankedStudent
from core.scores import format_score, validate_score
from utils.logger import get_logger

logger = get_logger()

Student = Mapping[str, Any]  # {name, score}

def rank_students(students: Sequence[Student]) -> List[RankedStudent]:
    """Sorts students by score, highest first, and numbers them from 1.

    Equal scores keep their input order and still get distinct ranks.

    Raises:
        InvalidScore: If any score is missing, non-numeric or not finite.
    """
    validated = [
        (str(student.get("name") or ""), validate_score(student.get("score"), student.get("name")))
        for student in students
    ]
    ordered = sorted(validated, key=lambda item: item[1], reverse=True)
    return [RankedStudent(name=name, score=score, rank=position) for position, (name, score) in enumerate(ordered, start=1)]

def format_date(as_of: datetime) -> str:
    """Formats a date as 'dd Mon yyyy', e.g. '29 Jul 2024'."""
    return f"{as_of.day:02d} {config.MONTH_ABBREVIATIONS[as_of.month - 1]} {as_of.year:04d}"

def render_summary(
    class_name: str,
    subject_name: str,
    ranked: Sequence[RankedStudent],
    as_of: datetime,
    institution_name: str = config.INSTITUTION_NAME,
) -> str:
    """Renders an already-ranked cohort. Never fails on long names; they just push the columns out."""
    lines = [
        f"*{institution_name}*",
        f"*Date:* {format_date(as_of)}",
        config.SEPARATOR,
        "*Marks Summary*",
        f"*Class:* {class_name}",
        f"*Subject:* {subject_name}",
        "",
        "*Top Rankers:*",
    ]
    for student in ranked[:config.TOP_RANKER_COUNT]:
        lines.append(f"- {student.name} (*{format_score(student.score)}*)")

    lines += [
        config.SEPARATOR,
        "*Rank | Student Name | Marks*",
        config.SEPARATOR,
    ]
    for student in ranked:
        rank = f"{student.rank}.".ljust(config.RANK_COLUMN_WIDTH)
        name = student.name.ljust(config.NAME_COLUMN_WIDTH)
        lines.append(f"{rank}| {name}| *{format_score(student.score)}*")

    lines += [
        config.SEPARATOR,
        f"*Total Students:* {len(ranked)}",
        config.SEPARATOR,
    ]
    return "\n".join(lines)

def format_summary(
    class_name: str,
    subject_name: str,
    students: Sequence[Student],
    as_of: Optional[datetime] = None,
) -> str:
    """Ranks students and renders the marks summary dated as_of (defaults to now)."""
    ranked = rank_students(students)
    if as_of is None:
        as_of = datetime.now()
    logger.info(f"Rendering marks summary for {class_name!r} / {subject_name!r} ({len(ranked)} students).")
    return render_summary(class_name, subject_name, ranked, as_of)

def find_mark_record(
    records: Sequence[MarkRecord], exam_id: str, class_id: str, subject_id: str
) -> Optional[MarkRecord]:
    """Returns the first record for this exam, class and subject, if any."""
    for record in records:
        if (record.get("examId"), record.get("classId"), record.get("subjectId")) == (exam_id, class_id, subject_id):
            return record
    return None

def cohort_from_record(record: MarkRecord) -> List[Dict[str, Any]]:
    """Turns one mark record into the {name, score} list the summary ranks.

    Record order is kept so ties rank the way the record lists them. Missing
    scores are passed through unchanged; rank_students rejects them.
    """
    return [
        {"name": entry.get("studentName") or "", "score": entry.get("marks")}
        for entry in record.get("marks") or []
    ]
