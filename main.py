"""Main execution script for the Scholarship Marks Reporter."""

from dotenv import load_dotenv

# Environment must be loaded before config reads it
load_dotenv()

import config
from utils.logger import setup_logger
from utils.error_handler import (APIError, AuthenticationError, ConfigError, DataSourceError,
                                 InvalidScore, SummaryGenerationError, UserCancelledError)
import auth
from core.aggregator import build_scholarship_report
from core.models import ReportInputs
from core.summary import cohort_from_record, find_mark_record, format_summary
from services.firestore_api import FirestoreService
from services.gemini_ai import GeminiClient
from services.report_inputs import MarksDataSource, load_report_inputs
from services.snapshot_source import SnapshotSource
import ui.cli as cli

logger = setup_logger()

def open_data_source() -> MarksDataSource:
    """Returns the snapshot file source when configured, otherwise Firestore."""
    if config.SNAPSHOT_FILE:
        logger.info(f"Using local snapshot {config.SNAPSHOT_FILE}")
        return SnapshotSource(config.SNAPSHOT_FILE)
    credentials = auth.get_credentials()
    return FirestoreService(credentials)

def run_scholarship_report(inputs: ReportInputs):
    rows = build_scholarship_report(inputs)
    cli.display_scholarship_report(rows)

def run_marks_summary(inputs: ReportInputs):
    """Lets the user pick one exam, class and subject and prints its marks summary."""
    used = {(r.get("examId"), r.get("classId"), r.get("subjectId")) for r in inputs.marks}
    exams = [e for e in inputs.exams if any(key[0] == e.get("id") for key in used)]
    exam = cli.prompt_for_selection(exams, cli.format_exam_for_display, "Select the exam:")
    if not exam:
        cli.display_warning("No exams with marks were found.")
        return

    classes = [c for c in inputs.classes if any(key[:2] == (exam["id"], c.get("id")) for key in used)]
    school_class = cli.prompt_for_selection(classes, cli.format_catalog_entry_for_display, "Select the class:")
    if not school_class:
        cli.display_warning(f"No classes have marks for exam '{exam.get('name')}'.")
        return

    subjects = [s for s in inputs.subjects if (exam["id"], school_class["id"], s.get("id")) in used]
    subject = cli.prompt_for_selection(subjects, cli.format_catalog_entry_for_display, "Select the subject:")
    if not subject:
        cli.display_warning(f"No subjects have marks for class '{school_class.get('name')}'.")
        return

    record = find_mark_record(inputs.marks, exam["id"], school_class["id"], subject["id"])
    students = cohort_from_record(record) if record else []
    subject_label = f"{subject.get('name')} ({exam.get('name')})"
    logger.info(f"Building marks summary for class {school_class['id']}, subject {subject['id']}, exam {exam['id']}.")

    message = format_summary(school_class.get("name", ""), subject_label, students)
    cli.display_summary(message)

    if not config.GEMINI_API_KEY:
        logger.debug("GEMINI_API_KEY not set; skipping AI summary.")
        return
    if not cli.confirm_action("Also generate an AI-written version of this summary?", default=False):
        return
    try:
        ai_message = GeminiClient().generate_summary(school_class.get("name", ""), subject_label, students)
    except (ConfigError, SummaryGenerationError) as e:
        logger.error(f"AI summary failed: {e}")
        cli.display_warning(f"AI summary unavailable: {e}")
        return
    cli.display_summary(ai_message, title="AI Marks Summary")

def main():
    """Main function to run the reporting workflow."""
    logger.info("Starting Scholarship Marks Reporter.")
    cli.display_welcome()

    try:
        cli.display_step(1, "Loading marks, classes, subjects and exams...")
        inputs = load_report_inputs(open_data_source())
        cli.display_success(f"Loaded {len(inputs.marks)} mark records.")

        cli.display_step(2, "Choose a report")
        choice = cli.prompt_for_selection(cli.REPORT_CHOICES, cli.format_report_choice, "Which report do you want?")

        cli.display_step(3, choice["label"])
        if choice["key"] == "scholarship":
            run_scholarship_report(inputs)
        else:
            run_marks_summary(inputs)

    except FileNotFoundError as e:
        logger.critical(f"Required file not found: {e}")
        cli.display_error(f"Missing required file: {e}")
    except (AuthenticationError, ConfigError) as e:
        logger.critical(f"Setup or Authentication Error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Setup Error: {e}")
    except APIError as e:
        logger.error(f"API Error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"API Error ({e.service or 'Unknown'}): {e}")
    except (DataSourceError, InvalidScore) as e:
        logger.error(f"Invalid mark data: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Invalid mark data: {e}")
    except UserCancelledError as e:
        logger.info(f"Operation cancelled by user: {e}")
        cli.display_warning(f"Operation cancelled: {e}")
    except KeyboardInterrupt:
        logger.info("Operation interrupted by user (Ctrl+C).")
        cli.display_warning("Operation interrupted.")
    except Exception as e:
        logger.critical(f"An unexpected error occurred: {e}", exc_info=True)
        cli.display_error(f"An unexpected error occurred: {e}. Check logs for details.")
    finally:
        cli.display_farewell()

if __name__ == "__main__":
    main()
