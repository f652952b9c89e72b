import os
import tempfile
from datetime import datetime

import pytest

# Keep test runs from writing into the working directory's logs/ folder
os.environ.setdefault("REPORT_LOG_DIR", tempfile.mkdtemp(prefix="report-logs-"))

from core.models import ReportInputs


@pytest.fixture
def as_of() -> datetime:
    return datetime(2024, 7, 29, 10, 30)


@pytest.fixture
def classes():
    return [
        {"id": "c6", "name": "6th Standard"},
        {"id": "c7", "name": "7th Standard"},
    ]


@pytest.fixture
def subjects():
    return [
        {"id": "s-math", "name": "Math"},
        {"id": "s-eng", "name": "English"},
        {"id": "s-mar", "name": "Marathi"},
        {"id": "s-int", "name": "बुद्धिमत्ता चाचणी"},
        {"id": "s-sci", "name": "Science"},
    ]


@pytest.fixture
def exams():
    return [
        {"id": "e-sch1", "name": "Scholarship Test 1", "totalMarks": 100},
        {"id": "e-sch2", "name": "Annual SCHOLARSHIP Exam", "totalMarks": 150},
        {"id": "e-unit", "name": "Unit Test 1", "totalMarks": 25},
    ]


def mark_record(exam_id, class_id, subject_id, *entries):
    """Builds a raw mark document; entries are (studentId, studentName, marks)."""
    return {
        "examId": exam_id,
        "classId": class_id,
        "subjectId": subject_id,
        "marks": [
            {"studentId": sid, "studentName": name, "marks": score}
            for sid, name, score in entries
        ],
    }


@pytest.fixture
def make_record():
    return mark_record


@pytest.fixture
def report_inputs(classes, subjects, exams):
    marks = [
        mark_record("e-sch1", "c6", "s-math", ("st1", "Priya Joshi", 45), ("st2", "Rahul Sharma", 40)),
        mark_record("e-sch1", "c6", "s-eng", ("st1", "Priya Joshi", 30), ("st2", "Rahul Sharma", 48)),
        mark_record("e-unit", "c6", "s-math", ("st1", "Priya Joshi", 20)),
    ]
    return ReportInputs(
        marks=tuple(marks),
        classes=tuple(classes),
        subjects=tuple(subjects),
        exams=tuple(exams),
    )
