"""Configuration settings for the Scholarship Marks Reporter."""

import os
import logging
from typing import Final, List, Tuple

# Debug flag: 1 = debug mode (verbose logging), 0 = production mode
DEBUG: Final[int] = int(os.environ.get("REPORT_DEBUG", "0"))

# --- Report Settings ---

INSTITUTION_NAME: Final[str] = os.environ.get("INSTITUTION_NAME", "Abhinav Public School Ajanale")

# Column order of the scholarship table follows this list
SCHOLARSHIP_SUBJECT_NAMES: Final[Tuple[str, ...]] = ("Math", "English", "Marathi", "बुद्धिमत्ता चाचणी")

# Exams whose name contains this keyword (case-insensitive) feed the scholarship report
SCHOLARSHIP_EXAM_KEYWORD: Final[str] = "scholarship"

# --- Summary Layout ---

SEPARATOR: Final[str] = "-" * 33
TOP_RANKER_COUNT: Final[int] = 3
RANK_COLUMN_WIDTH: Final[int] = 4
NAME_COLUMN_WIDTH: Final[int] = 14
# Fixed English abbreviations so the date line does not depend on the process locale
MONTH_ABBREVIATIONS: Final[Tuple[str, ...]] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MISSING_MARK_PLACEHOLDER: Final[str] = "-"
UNKNOWN_CLASS_NAME: Final[str] = "Unknown"

# --- Firestore Settings ---

FIRESTORE_PROJECT_ID: Final[str | None] = os.environ.get("FIRESTORE_PROJECT_ID")
FIRESTORE_DATABASE: Final[str] = os.environ.get("FIRESTORE_DATABASE", "(default)")

MARKS_COLLECTION: Final[str] = "marks"
CLASSES_COLLECTION: Final[str] = "classes"
SUBJECTS_COLLECTION: Final[str] = "subjects"
EXAMS_COLLECTION: Final[str] = "exams"

SCOPES: Final[List[str]] = [
    "https://www.googleapis.com/auth/datastore",
]

# Pagination size for Firestore list calls
DEFAULT_PAGE_SIZE: Final[int] = 300

# --- File Paths ---

# A service account key takes precedence over the interactive OAuth flow
SERVICE_ACCOUNT_FILE: Final[str | None] = os.environ.get("GOOGLE_SERVICE_ACCOUNT_FILE")
CLIENT_SECRETS_FILE: Final[str] = os.environ.get("CLIENT_SECRETS_PATH", "client_secrets.json")
_token_dir = os.path.dirname(CLIENT_SECRETS_FILE) if os.path.dirname(CLIENT_SECRETS_FILE) else '.'
TOKEN_FILE: Final[str] = os.path.join(_token_dir, "token.json")

# Local JSON export of the four collections; used instead of Firestore when set
SNAPSHOT_FILE: Final[str | None] = os.environ.get("MARKS_SNAPSHOT_FILE")

LOG_DIR: Final[str] = os.environ.get("REPORT_LOG_DIR", "logs")
LOG_FILE: Final[str] = os.path.join(LOG_DIR, "scholarship_reporter.log")

# --- Gemini AI Settings ---

GEMINI_API_KEY: Final[str | None] = os.environ.get("GEMINI_API_KEY")
GEMINI_MODEL: Final[str] = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash-latest")

if not GEMINI_API_KEY and DEBUG:
    logging.warning("GEMINI_API_KEY environment variable not set. AI summaries will be disabled.")

GEMINI_SUMMARY_PROMPT_TEMPLATE: Final[str] = """You are an expert at formatting data for plain text messaging apps like WhatsApp.
Your task is to convert the following JSON data into a clean, readable, monospaced format.

**Data:**
School Name: {institution_name}
Date: {date}
Class Name: {class_name}
Subject Name: {subject_name}
Students Data: {students_json}

**Instructions:**
1.  **Sort the students:** Sort the students in descending order based on their 'marks'.
2.  **Rank the students:** Assign a rank to each student based on their sorted position. The student with the highest marks gets rank 1.
3.  **Identify Top Rankers:** Identify the top 3 students.
4.  **Format the Output:** Create a single string with newlines for the WhatsApp message.
    - Start with the school name and date, each on a new line and formatted with asterisks for bolding.
    - Use hyphens to create separator lines.
    - Add a header for the class and subject.
    - After the subject, list the "Top Rankers". For each top ranker, show their name and their marks in parentheses. Make the marks bold (e.g., *95*).
    - Create a header row for all students: "*Rank | Student Name | Marks*".
    - For each student, create a row with their rank, name, and marks. Align the columns to form a neat table. Make the marks bold.
    - At the end, add a line for the total number of students.

Reply with the formatted message only."""

# --- Logging Configuration ---
# File logging always; console logging is only enabled in DEBUG mode
LOG_LEVEL = logging.DEBUG if DEBUG else logging.INFO
# Structured log format: timestamp, level, logger, module.function:line, message
LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(module)s.%(funcName)s:%(lineno)d | %(message)s'
