"""OAuth helper for the Google Tasks store."""

import os
from pathlib import Path
from typing import Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import Resource, build

from .exceptions import TasksAuthError

TASKS_SCOPES = ["https://www.googleapis.com/auth/tasks"]


class TasksAuthenticator:
    """Loads, refreshes and stores Google Tasks OAuth credentials.

    Paths default to ``TASKS_CREDENTIALS_PATH`` / ``TASKS_TOKEN_PATH`` or to
    ``config/`` under the project root. With ``TASKS_NON_INTERACTIVE`` set
    (or ``interactive=False``) a missing or unusable token raises instead of
    opening a browser.
    """

    def __init__(
        self,
        credentials_path: Optional[Path] = None,
        token_path: Optional[Path] = None,
        interactive: bool = True,
    ):
        config_dir = Path(__file__).parent.parent.parent / "config"
        self._credentials_path = credentials_path or Path(
            os.environ.get("TASKS_CREDENTIALS_PATH", config_dir / "credentials.json")
        )
        self._token_path = token_path or Path(
            os.environ.get("TASKS_TOKEN_PATH", config_dir / "tasks_token.json")
        )
        self._interactive = interactive and not os.environ.get("TASKS_NON_INTERACTIVE")
        self._service: Optional[Resource] = None

    def _load_token(self) -> Optional[Credentials]:
        if not self._token_path.exists():
            return None
        creds = Credentials.from_authorized_user_file(str(self._token_path), TASKS_SCOPES)
        if creds.scopes and all(s in creds.scopes for s in TASKS_SCOPES):
            return creds
        if not self._interactive:
            raise TasksAuthError(
                f"Token at {self._token_path} lacks the Tasks scope. "
                "Delete it and re-authenticate."
            )
        self._token_path.unlink()
        return None

    def _run_flow(self, reason: str) -> Credentials:
        if not self._interactive:
            raise TasksAuthError(
                f"Authentication requires user interaction ({reason}) "
                "but TASKS_NON_INTERACTIVE is set."
            )
        if not self._credentials_path.exists():
            raise FileNotFoundError(
                f"Credentials file not found at {self._credentials_path}. "
                "Download OAuth client credentials from Google Cloud Console."
            )
        flow = InstalledAppFlow.from_client_secrets_file(
            str(self._credentials_path), TASKS_SCOPES
        )
        return flow.run_local_server(port=0)

    def _credentials(self) -> Credentials:
        creds = self._load_token()
        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except RefreshError as e:
                if not self._interactive:
                    raise TasksAuthError(f"Token refresh failed: {e}") from e
                creds = self._run_flow("refresh failed")
        else:
            creds = self._run_flow("no valid token")

        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        return creds

    def get_service(self) -> Resource:
        """Get or create the Google Tasks API service (cached)."""
        if self._service is None:
            self._service = build("tasks", "v1", credentials=self._credentials())
        return self._service
