"""Handles Google authentication for the Firestore data source."""

import os
from typing import Optional

from google.auth.credentials import Credentials as BaseCredentials
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

import config
from utils.logger import get_logger
from utils.error_handler import AuthenticationError

logger = get_logger()

OAUTH_LOCAL_PORT = 8081

def _service_account_credentials(path: str) -> BaseCredentials:
    """Loads and refreshes service account credentials so they are valid immediately."""
    logger.info(f"Using service account credentials from {path}")
    try:
        creds = service_account.Credentials.from_service_account_file(path, scopes=config.SCOPES)
        creds.refresh(Request())
    except (ValueError, GoogleAuthError) as e:
        logger.error(f"Service account authentication failed: {e}", exc_info=config.DEBUG)
        raise AuthenticationError(f"Service account authentication failed: {e}") from e
    return creds

def _save_token(creds: Credentials) -> None:
    try:
        with open(config.TOKEN_FILE, "w") as token_file:
            token_file.write(creds.to_json())
        logger.debug(f"Token saved to {config.TOKEN_FILE}")
    except OSError as e:
        logger.warning(f"Failed to save token to {config.TOKEN_FILE}: {e}")

def get_credentials() -> BaseCredentials:
    """Gets valid Google credentials with the Firestore scope.

    A service account key (config.SERVICE_ACCOUNT_FILE) is used when set.
    Otherwise the cached user token is loaded, refreshed if expired, or the
    installed-app OAuth flow runs with config.CLIENT_SECRETS_FILE.

    Returns:
        Valid Google credentials.

    Raises:
        AuthenticationError: If authentication fails or is cancelled.
        FileNotFoundError: If neither a service account key nor client secrets are available.
    """
    if config.SERVICE_ACCOUNT_FILE:
        if not os.path.exists(config.SERVICE_ACCOUNT_FILE):
            logger.critical(f"Missing service account file: {config.SERVICE_ACCOUNT_FILE}")
            raise FileNotFoundError(f"{config.SERVICE_ACCOUNT_FILE} not found.")
        return _service_account_credentials(config.SERVICE_ACCOUNT_FILE)

    creds: Optional[Credentials] = None

    logger.info(f"Checking for token file: {config.TOKEN_FILE}")
    if os.path.exists(config.TOKEN_FILE):
        try:
            creds = Credentials.from_authorized_user_file(config.TOKEN_FILE, config.SCOPES)
            logger.debug(f"Loaded credentials from {config.TOKEN_FILE}")
        except ValueError as e:
            logger.warning(f"Error loading token file {config.TOKEN_FILE}: {e}. Proceeding with re-authentication.")
            creds = None

    if creds and creds.valid:
        logger.info("Credentials are valid. Using cached token.")
        return creds

    if creds and creds.expired and creds.refresh_token:
        logger.info("Credentials expired, attempting refresh...")
        try:
            creds.refresh(Request())
        except GoogleAuthError as e:
            logger.error(f"Credentials refresh failed: {e}", exc_info=config.DEBUG)
            # Drop the stale token so the next run starts a fresh flow
            if os.path.exists(config.TOKEN_FILE):
                os.remove(config.TOKEN_FILE)
            raise AuthenticationError("Failed to refresh token. Please re-authenticate.") from e
        logger.info("Credentials refreshed successfully.")
        _save_token(creds)
        return creds

    if not os.path.exists(config.CLIENT_SECRETS_FILE):
        logger.critical(f"{config.CLIENT_SECRETS_FILE} not found. Cannot initiate OAuth flow.")
        raise FileNotFoundError(f"{config.CLIENT_SECRETS_FILE} not found.")

    logger.info("No valid credentials found. Starting OAuth flow...")
    try:
        flow = InstalledAppFlow.from_client_secrets_file(config.CLIENT_SECRETS_FILE, config.SCOPES)
        creds = flow.run_local_server(port=OAUTH_LOCAL_PORT)
    except Exception as e:
        logger.error(f"OAuth flow failed unexpectedly: {e}", exc_info=config.DEBUG)
        raise AuthenticationError(f"OAuth flow failed: {e}") from e

    if not creds:
        raise AuthenticationError("OAuth flow completed but no credentials were obtained.")

    logger.info("Authentication successful.")
    _save_token(creds)
    return creds
