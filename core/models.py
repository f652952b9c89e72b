"""Value types shared by the aggregation and summary pipelines."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

Score = Union[int, float]

# Raw documents as delivered by the data sources. Keys follow the stored
# collections: examId, classId, subjectId, marks[{studentId, studentName, marks}]
MarkRecord = Dict[str, Any]
CatalogEntry = Dict[str, Any]  # {id, name} or, for exams, {id, name, totalMarks}

@dataclass(frozen=True)
class SubjectMark:
    """One pivoted subject cell of a report row."""
    subject_name: str
    score: Score
    total_marks: Optional[Score]

@dataclass(frozen=True)
class ReportRow:
    """All tracked subject marks of one student in one exam."""
    student_id: str
    student_name: str
    class_id: str
    class_name: str
    exam_id: str
    exam_name: str
    marks: Tuple[SubjectMark, ...]
    total: Score

    def mark_for(self, subject_name: str) -> Optional[SubjectMark]:
        """Returns the mark for an exact subject name, or None when the row has none."""
        for mark in self.marks:
            if mark.subject_name == subject_name:
                return mark
        return None

@dataclass(frozen=True)
class RankedStudent:
    name: str
    score: Score
    rank: int

@dataclass(frozen=True)
class ReportInputs:
    """The four raw collections, fully materialized before aggregation starts."""
    marks: Tuple[MarkRecord, ...] = field(default_factory=tuple)
    classes: Tuple[CatalogEntry, ...] = field(default_factory=tuple)
    subjects: Tuple[CatalogEntry, ...] = field(default_factory=tuple)
    exams: Tuple[CatalogEntry, ...] = field(default_factory=tuple)
