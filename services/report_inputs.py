"""Fetches the four report input collections concurrently."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Protocol

from core.models import ReportInputs
from utils.logger import get_logger

logger = get_logger()

class MarksDataSource(Protocol):
    def get_all_marks(self) -> List[Dict[str, Any]]: ...
    def get_classes(self) -> List[Dict[str, Any]]: ...
    def get_subjects(self) -> List[Dict[str, Any]]: ...
    def get_exams(self) -> List[Dict[str, Any]]: ...

def load_report_inputs(source: MarksDataSource) -> ReportInputs:
    """Fetches marks, classes, subjects and exams in parallel and waits for all four.

    The first fetch error propagates unchanged.
    """
    logger.info("Fetching marks, classes, subjects and exams...")
    with ThreadPoolExecutor(max_workers=4, thread_name_prefix="report-inputs") as executor:
        marks = executor.submit(source.get_all_marks)
        classes = executor.submit(source.get_classes)
        subjects = executor.submit(source.get_subjects)
        exams = executor.submit(source.get_exams)

        inputs = ReportInputs(
            marks=tuple(marks.result()),
            classes=tuple(classes.result()),
            subjects=tuple(subjects.result()),
            exams=tuple(exams.result()),
        )
    logger.info(
        f"Loaded {len(inputs.marks)} mark records, {len(inputs.classes)} classes, "
        f"{len(inputs.subjects)} subjects, {len(inputs.exams)} exams."
    )
    return inputs
