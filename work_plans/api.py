"""HTTP client for the work-plan backend."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import requests


BASE_URL = os.getenv("WORK_PLANS_API_URL", "http://localhost:3000/api")
TIMEOUT = 30


class APIClient:
    """Thin JSON-over-HTTP transport.

    Requests are sent once; HTTP errors surface as ``requests.HTTPError`` and
    are left to the caller. With ``offline`` set, GET requests are answered
    from JSON fixtures previously saved with ``dump_json``.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = BASE_URL,
        dump_json: bool = False,
        offline: bool = False,
        json_dir: Path = Path("out/json"),
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.dump_json = dump_json
        self.offline = offline
        self.session = requests.Session()
        self.json_dir = Path(json_dir)
        if dump_json:
            self.json_dir.mkdir(parents=True, exist_ok=True)

    def _json_path(self, endpoint: str) -> Path:
        name = endpoint.strip("/").replace("/", "_") + ".json"
        return self.json_dir / name

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        if self.offline:
            if method != "GET":
                raise RuntimeError(f"Cannot {method} {endpoint} in offline mode")
            with self._json_path(endpoint).open("r", encoding="utf-8") as f:
                return json.load(f)
        url = self.base_url + endpoint
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        logging.debug("%s %s", method, url)
        resp = self.session.request(
            method,
            url,
            headers=headers,
            json=payload,
            params=params or None,
            timeout=TIMEOUT,
        )
        resp.raise_for_status()
        if resp.status_code == 204 or not resp.content:
            return None
        data = resp.json()
        if self.dump_json and method == "GET":
            with self._json_path(endpoint).open("w", encoding="utf-8") as f:
                json.dump(data, f)
        return data

    def get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, payload: Any) -> Any:
        return self.request("POST", endpoint, payload=payload)

    def put(self, endpoint: str, payload: Any) -> Any:
        return self.request("PUT", endpoint, payload=payload)

    def patch(self, endpoint: str, payload: Any) -> Any:
        return self.request("PATCH", endpoint, payload=payload)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)
