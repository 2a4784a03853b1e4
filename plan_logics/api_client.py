import json
import logging
import threading
from urllib.parse import urlencode

import requests

from plan_logics import config
from plan_logics.errors import ApiError
from plan_logics.schemas import parse_units


logger = logging.getLogger(__name__)

UNIT_SEARCH_PATH = '/lists/unit/search'


class MemoryKeyValueStore:
    """In-memory key-value collaborator (token storage)."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key, default=None):
        with self._lock:
            return self._data.get(key, default)

    def set(self, key, value):
        with self._lock:
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value


def join_url(base, path):
    base = str(base or '').rstrip('/')
    path = str(path or '').lstrip('/')
    return f"{base}/{path}" if base else f"/{path}"


def error_message(data, status):
    """
    Human-readable message from an error body.

    FastAPI's `detail` may be a string or a list of {msg: ...}; both are
    flattened. Falls back to `message`, the raw text, then "HTTP <status>".
    """
    if isinstance(data, str) and data:
        return data
    if isinstance(data, dict):
        detail = data.get('detail')
        if isinstance(detail, list):
            return " | ".join(
                d.get('msg') if isinstance(d, dict) and d.get('msg') else json.dumps(d, ensure_ascii=False)
                for d in detail
            )
        if isinstance(detail, dict) and detail.get('message'):
            return str(detail['message'])
        if detail:
            return str(detail)
        if data.get('message'):
            return str(data['message'])
    return f"HTTP {status}"


class ApiClient:
    """
    Thin JSON client for the planning backend.

    Every request carries `Authorization: Bearer <token>` when the token store
    holds one. Non-2xx responses raise ApiError with the server's status;
    transport failures raise ApiError with status 0.

    Args:
        base_url: API root, e.g. "http://localhost:8000".
        token_store: Object with get(key) / set(key, value).
        timeout: Per-request timeout in seconds.
        session: Optional requests.Session (injected in tests).
    """

    def __init__(self, base_url=config.API_BASE, token_store=None, timeout=config.HTTP_TIMEOUT_SECONDS,
                 session=None):
        self.base_url = str(base_url or '').rstrip('/')
        self.token_store = token_store if token_store is not None else MemoryKeyValueStore()
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, has_body):
        headers = {'Accept': 'application/json'}
        if has_body:
            headers['Content-Type'] = 'application/json'
        token = self.token_store.get(config.TOKEN_KEY)
        if token:
            headers['Authorization'] = f"Bearer {token}"
        return headers

    @staticmethod
    def _parse_body(response):
        content_type = response.headers.get('content-type', '')
        if 'application/json' in content_type:
            try:
                return response.json()
            except ValueError:
                return {}
        return response.text or ''

    def request(self, path, method='GET', body=None):
        """Send one request and return the decoded body (JSON, or text when not JSON)."""
        url = join_url(self.base_url, path)
        method = method.upper()
        logger.debug("[HTTP] %s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(body is not None),
                data=json.dumps(body) if body is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("[HTTP] %s %s failed: %s", method, url, e)
            raise ApiError(str(e) or "Network error", status=0, url=url, method=method) from e

        data = self._parse_body(response)
        if not 200 <= response.status_code < 300:
            message = error_message(data, response.status_code)
            logger.warning("[HTTP] %s %s -> %s: %s", method, url, response.status_code, message)
            raise ApiError(message, status=response.status_code, data=data, url=url, method=method)
        return data

    def get(self, path):
        return self.request(path, 'GET')

    def post(self, path, body):
        return self.request(path, 'POST', body)

    # ── Unit directory ────────────────────────────────────────

    def list_units(self, branch_id):
        """Units of a branch; no branch means no call and no units."""
        if not branch_id:
            return []
        query = urlencode({'branch_id': int(branch_id)})
        data = self.get(f"{UNIT_SEARCH_PATH}?{query}")
        units = parse_units(data if isinstance(data, list) else [])
        logger.info("[UNITS] branch=%s -> %d units", branch_id, len(units))
        return units
