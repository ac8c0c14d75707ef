"""HTTP client the rk command uses to talk to the board server."""
from typing import Any, Dict, List, Optional

import requests

from kanban_board.cli.config import GlobalConfig, load_global_config


class ApiError(RuntimeError):
    """Request failed: transport error or a non-2xx answer"""

    def __init__(self, message: str, status: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.detail = detail


class ApiClient:
    """Thin wrapper over the /api routes, authenticated with X-API-Key"""

    def __init__(self, base_url: str, api_key: str, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"X-API-Key": api_key})

    @classmethod
    def from_config(cls, config: Optional[GlobalConfig] = None) -> "ApiClient":
        config = config or load_global_config()
        if not config.api_url:
            raise ApiError("API URL not configured. Run: rk init <URL> <API_KEY>")
        if not config.api_key:
            raise ApiError("API key not configured. Run: rk init --key <API_KEY>")
        return cls(config.api_url, config.api_key)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/api{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(f"Cannot connect to {self.base_url}: {exc}") from exc

        if not response.ok:
            try:
                body = response.json()
                detail = body.get("detail") if isinstance(body, dict) else body
            except ValueError:
                detail = response.text
            raise ApiError(
                f"{method} {path} failed ({response.status_code}): {detail}",
                status=response.status_code,
                detail=detail,
            )
        return response

    def _json(self, method: str, path: str, **kwargs) -> Any:
        return self._request(method, path, **kwargs).json()

    def list_projects(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/projects")

    def get_project_columns(self, project_id: int) -> List[Dict[str, Any]]:
        return self._json("GET", f"/projects/{project_id}/columns")

    def list_tasks(self, project_id: int) -> List[Dict[str, Any]]:
        return self._json("GET", "/tasks", params={"project_id": project_id})

    def get_task(self, task_id: int) -> Dict[str, Any]:
        return self._json("GET", f"/tasks/{task_id}")

    def create_task(
        self,
        project_id: int,
        title: str,
        column_id: Optional[int] = None,
        description: Optional[str] = None,
        source_tag: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {
            "title": title,
            "column_id": column_id,
            "description": description,
            "source_tag": source_tag,
        }
        return self._json("POST", f"/projects/{project_id}/tasks", json=payload)

    def update_task(self, task_id: int, **fields) -> Dict[str, Any]:
        return self._json("PUT", f"/tasks/{task_id}", json=fields)

    def move_task(self, task_id: int, column_id: int) -> Dict[str, Any]:
        return self.update_task(task_id, column_id=column_id)

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    def create_linked_path(
        self,
        project_id: int,
        path: str,
        hostname: Optional[str] = None,
        default_column_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        payload = {"path": path, "hostname": hostname, "default_column_id": default_column_id}
        return self._json("POST", f"/projects/{project_id}/linked-paths", json=payload)

    def delete_linked_path_by_path(self, path: str) -> None:
        self._request("DELETE", "/linked-paths/by-path", json={"path": path})

    def lookup_linked_path(self, path: str, hostname: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Binding covering ``path``, or None when the directory is not linked"""
        params = {"path": path}
        if hostname:
            params["hostname"] = hostname
        try:
            return self._json("GET", "/linked-paths/lookup", params=params)
        except ApiError as exc:
            if exc.status == 404:
                return None
            raise
