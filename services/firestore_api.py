"""Wrapper for the Firestore REST API holding the mark, class, subject and exam collections."""

from typing import Any, Dict, List, Optional

from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError
from google.auth.credentials import Credentials

import config
from api_clients import build_service
from utils.logger import get_logger
from utils.error_handler import APIError, ConfigError, DataSourceError
from utils.retry import retry_on_exception

logger = get_logger()

RETRYABLE_FIRESTORE_ERRORS = (HttpError, TimeoutError, ConnectionError)
RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

def should_retry_firestore(e: Exception) -> bool:
    """Predicate for the retry decorator: rate limits, server errors and network failures."""
    if isinstance(e, HttpError):
        return e.resp.status in RETRYABLE_STATUS_CODES
    return isinstance(e, (TimeoutError, ConnectionError))

def decode_value(value: Dict[str, Any]) -> Any:
    """Converts one typed Firestore REST value into a plain Python value.

    Raises:
        DataSourceError: If the value type is not recognised.
    """
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        # int64 values arrive as JSON strings
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    for key in ("stringValue", "timestampValue", "referenceValue", "bytesValue"):
        if key in value:
            return value[key]
    if "geoPointValue" in value:
        return dict(value["geoPointValue"])
    if "arrayValue" in value:
        return [decode_value(item) for item in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    raise DataSourceError(f"Unsupported Firestore value: {value!r}")

def decode_fields(fields: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {name: decode_value(value) for name, value in fields.items()}

def decode_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Decodes a Firestore document; its id is the last segment of the resource name."""
    name = document.get("name")
    if not name:
        raise DataSourceError("Firestore document has no resource name.")
    data = decode_fields(document.get("fields", {}))
    data["id"] = name.rsplit("/", 1)[-1]
    return data

class FirestoreService:
    """Reads the raw collections the reports are built from."""

    SERVICE_NAME = 'firestore'
    VERSION = 'v1'

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        project_id: Optional[str] = config.FIRESTORE_PROJECT_ID,
        database: str = config.FIRESTORE_DATABASE,
        service: Optional[Resource] = None,
    ):
        """Initializes the FirestoreService.

        Args:
            credentials: Valid Google credentials; unused when service is given.
            project_id: The Google Cloud project that owns the database.
            database: The Firestore database id.
            service: A prebuilt Firestore resource.

        Raises:
            ConfigError: If no project id is configured.
            AuthenticationError: If credentials are invalid.
            APIError: If the Firestore service cannot be built.
        """
        if not project_id:
            raise ConfigError("FIRESTORE_PROJECT_ID not found or provided.")
        logger.debug("Initializing FirestoreService...")
        self.service: Resource = service if service is not None else build_service(self.SERVICE_NAME, self.VERSION, credentials)
        self.parent = f"projects/{project_id}/databases/{database}/documents"
        logger.debug(f"FirestoreService initialized for {self.parent}.")

    @retry_on_exception(exceptions=RETRYABLE_FIRESTORE_ERRORS, max_attempts=3, should_retry=should_retry_firestore)
    def _list_page(self, collection_id: str, page_size: int, page_token: Optional[str]) -> Dict[str, Any]:
        return self.service.projects().databases().documents().list(
            parent=self.parent,
            collectionId=collection_id,
            pageSize=page_size,
            pageToken=page_token,
        ).execute()

    def list_collection(self, collection_id: str, page_size: int = config.DEFAULT_PAGE_SIZE) -> List[Dict[str, Any]]:
        """Lists and decodes every document of a top-level collection.

        Raises:
            APIError: If the API call fails after retries.
            DataSourceError: If a document cannot be decoded.
        """
        logger.info(f"Fetching Firestore collection '{collection_id}'...")
        documents: List[Dict[str, Any]] = []
        page_token = None
        try:
            while True:
                response = self._list_page(collection_id, page_size, page_token)
                page = response.get('documents', [])
                if config.DEBUG:
                    logger.debug(f"Fetched page with {len(page)} documents from '{collection_id}'.")
                documents.extend(decode_document(doc) for doc in page)

                page_token = response.get('nextPageToken')
                if not page_token:
                    break
        except HttpError as e:
            logger.error(f"Failed to list '{collection_id}': {e.resp.status} {e.content}", exc_info=config.DEBUG)
            raise APIError(
                f"Failed to list collection '{collection_id}': {e.resp.status}",
                status_code=e.resp.status,
                service=self.SERVICE_NAME
            ) from e
        except (TimeoutError, ConnectionError) as e:
            logger.error(f"Network error listing '{collection_id}': {e}", exc_info=config.DEBUG)
            raise APIError(f"Network error listing collection '{collection_id}': {e}", service=self.SERVICE_NAME) from e

        logger.info(f"Successfully fetched {len(documents)} documents from '{collection_id}'.")
        return documents

    def get_all_marks(self) -> List[Dict[str, Any]]:
        return self.list_collection(config.MARKS_COLLECTION)

    def get_classes(self) -> List[Dict[str, Any]]:
        return self.list_collection(config.CLASSES_COLLECTION)

    def get_subjects(self) -> List[Dict[str, Any]]:
        return self.list_collection(config.SUBJECTS_COLLECTION)

    def get_exams(self) -> List[Dict[str, Any]]:
        return self.list_collection(config.EXAMS_COLLECTION)
