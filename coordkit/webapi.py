"""Minimal JSON-over-HTTP helpers.
One attempt per call: no retry, no throttle, no cache.
"""
from __future__ import annotations
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, Optional

from .geocoding_base import GeocodingError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20
_SECRET_PARAMS = ('key', 'apikey', 'access_token')


def _redact(url: str) -> str:
    parts = urllib.parse.urlsplit(url)
    if not parts.query:
        return url
    pairs = urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
    safe = [(k, '***' if k.lower() in _SECRET_PARAMS else v) for k, v in pairs]
    return urllib.parse.urlunsplit(parts._replace(query=urllib.parse.urlencode(safe)))


def build_url(base: str, params: Optional[Dict[str, Any]] = None) -> str:
    if not params:
        return base
    return base + '?' + urllib.parse.urlencode(params)


def _open(req: urllib.request.Request, timeout: float) -> Any:
    logger.debug("%s %s", req.get_method(), _redact(req.full_url))
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = resp.read().decode('utf-8', 'replace')
    except urllib.error.HTTPError as e:
        raise GeocodingError(f"HTTP {e.code}: {e.reason}") from e
    except urllib.error.URLError as e:
        raise GeocodingError(f"Network error: {e.reason}") from e
    except (TimeoutError, OSError) as e:
        raise GeocodingError(f"Network error: {e}") from e
    try:
        return json.loads(data)
    except ValueError as e:
        raise GeocodingError(f"Invalid JSON response: {e}") from e


def get_json(url: str, params: Optional[Dict[str, Any]] = None,
             headers: Optional[Dict[str, str]] = None,
             timeout: float = DEFAULT_TIMEOUT) -> Any:
    req = urllib.request.Request(build_url(url, params), headers=headers or {})
    return _open(req, timeout)


def post_json(url: str, payload: Any = None, body: Optional[str] = None,
              headers: Optional[Dict[str, str]] = None,
              timeout: float = DEFAULT_TIMEOUT) -> Any:
    """POST either a JSON payload or a raw text body."""
    hdrs = dict(headers or {})
    if payload is not None:
        data = json.dumps(payload).encode('utf-8')
        hdrs.setdefault('Content-Type', 'application/json')
    else:
        data = (body or '').encode('utf-8')
        hdrs.setdefault('Content-Type', 'text/plain')
    req = urllib.request.Request(url, data=data, headers=hdrs, method='POST')
    return _open(req, timeout)
