# intern_tracker/client.py
import json
import logging
import os
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

API_URL = os.getenv("INTERN_TRACKER_API_URL", "http://localhost:8000")

TOKEN_KEY = "token"
USER_KEY = "currentUser"


class ApiClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionStore:
    """Token and current user of one client session, mirrored to a JSON file.

    Owned by whoever builds the ``ApiClient``; get/set/clear are the only way
    to change it.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._data: Dict[str, Any] = {}
        self._load()

    def _load(self):
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return
        if isinstance(data, dict):
            self._data = {k: data[k] for k in (TOKEN_KEY, USER_KEY) if k in data}

    def _save(self):
        if not self.path:
            return
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value
        self._save()

    def clear(self):
        self._data = {}
        if self.path and os.path.exists(self.path):
            os.remove(self.path)

    @property
    def token(self) -> Optional[str]:
        return self.get(TOKEN_KEY)

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self.get(USER_KEY)


class ApiClient:
    def __init__(self, base_url: str = API_URL, session: Optional[SessionStore] = None, http=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionStore()
        self.http = http or requests.Session()

    def _headers(self, requires_auth: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if requires_auth and self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    def request(self, method: str, path: str, *, json_body=None, params=None, requires_auth=True):
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json_body,
                params=params,
                headers=self._headers(requires_auth),
            )
        except requests.RequestException as e:
            raise ApiClientError(f"Network error: {e}")
        return self.handle_response(response)

    def handle_response(self, response):
        """Return the JSON body, or raise with the server's error message verbatim."""
        if response.status_code == 401 and self.session.token:
            # Stale credential, force a fresh login
            self.session.clear()
        if response.status_code >= 400:
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict):
                error_msg = data.get("error", "Unknown error")
            else:
                error_msg = response.text if response.text else "Empty response from server"
            raise ApiClientError(error_msg, response.status_code)
        try:
            return response.json()
        except ValueError:
            raise ApiClientError("Invalid response format", response.status_code)

    # --- Auth ---
    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self.request(
            "POST", "/auth/login",
            json_body={"email": email, "password": password},
            requires_auth=False,
        )
        self.session.set(TOKEN_KEY, data["token"])
        self.session.set(USER_KEY, data["user"])
        return data

    def logout(self):
        self.session.clear()

    def me(self) -> Dict[str, Any]:
        return self.request("GET", "/auth/me")

    def change_password(self, current_password: str, new_password: str):
        return self.request(
            "POST", "/auth/change-password",
            json_body={"currentPassword": current_password, "newPassword": new_password},
        )

    # --- Students ---
    def list_students(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/students")["students"]

    def student_stats(self) -> Dict[str, int]:
        return self.request("GET", "/students/stats")

    def get_student(self, student_id: int) -> Dict[str, Any]:
        return self.request("GET", f"/students/{student_id}")

    def create_student(self, **fields) -> Dict[str, Any]:
        return self.request("POST", "/students", json_body=fields)

    def update_student(self, student_id: int, **fields) -> Dict[str, Any]:
        return self.request("PUT", f"/students/{student_id}", json_body=fields)

    def delete_student(self, student_id: int) -> Dict[str, Any]:
        return self.request("DELETE", f"/students/{student_id}")

    # --- Activity ---
    def submit_daily_report(self, notes: str = None, video_entries=None, quiz_entries=None):
        body = {
            "notes": notes,
            "videoEntries": video_entries or [],
            "quizEntries": quiz_entries or [],
        }
        return self.request("POST", "/daily-reports", json_body=body)["dailyReport"]

    def daily_reports(self, user_id: Optional[int] = None):
        params = {"userId": user_id} if user_id is not None else None
        return self.request("GET", "/daily-reports", params=params)["dailyReports"]

    def progress(self, user_id: Optional[int] = None) -> Dict[str, Any]:
        params = {"userId": user_id} if user_id is not None else None
        return self.request("GET", "/progress", params=params)

    # --- Workflows ---
    def workflows(self) -> Dict[str, Any]:
        return self.request("GET", "/workflows")

    def create_workflow(self, **fields) -> Dict[str, Any]:
        return self.request("POST", "/workflows", json_body=fields)["workflow"]

    def set_assignment_status(self, workflow_id: int, status: str) -> Dict[str, Any]:
        return self.request(
            "PATCH", f"/workflows/{workflow_id}/assignment", json_body={"status": status}
        )["workflow"]

    # --- Reference lists and reports ---
    def categories(self):
        return self.request("GET", "/categories", requires_auth=False)["categories"]

    def departments(self):
        return self.request("GET", "/departments", requires_auth=False)["departments"]

    def supervisors(self):
        return self.request("GET", "/supervisors", requires_auth=False)["supervisors"]

    def report(self, user_id: Optional[int] = None) -> Dict[str, Any]:
        params = {"userId": user_id} if user_id is not None else None
        return self.request("GET", "/reports", params=params)["report"]
