from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..core.constants import ERROR_BODY_LOG_LIMIT
from ..core.exceptions import ConflictError, NotFoundError, TransientIOError
from .connection import RestConnection

logger = logging.getLogger(__name__)


def _fmt(value: Any) -> str:
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def eq(value: Any) -> str:
    """PostgREST equality filter, e.g. ``curso_id=eq.7``."""
    return f"eq.{_fmt(value)}"


def _status_error(method: str, path: str, exc: httpx.HTTPStatusError) -> Exception:
    status = exc.response.status_code
    if status == 409:
        return ConflictError("El registro ya existe")
    if status == 404:
        return NotFoundError(f"Recurso no encontrado: {path}")
    return TransientIOError(f"Error API: {status} en {method} {path}")


def rest_request(
    conn: RestConnection,
    method: str,
    path: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    payload: Any = None,
    prefer: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Send one request to the store and return the JSON body as a list of rows.

    HTTP failures are logged with the response body and re-raised as domain errors.
    """

    headers = {"Prefer": prefer} if prefer else None
    try:
        r = conn.client().request(method, path, params=params, json=payload, headers=headers)
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        body = e.response.text or ""
        logger.error(
            "REST %s %s failed: %s %s", method, path, e.response.status_code, body[:ERROR_BODY_LOG_LIMIT]
        )
        raise _status_error(method, path, e) from e
    except httpx.HTTPError as e:
        logger.error("REST %s %s failed: %s", method, path, e)
        raise TransientIOError("Error de conexión con el servidor") from e

    if not r.content:
        return []
    data = r.json()
    if isinstance(data, dict):
        return [data]
    return list(data or [])


def select(conn: RestConnection, table: str, params: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return rest_request(conn, "GET", table, params=params)


def insert(
    conn: RestConnection,
    table: str,
    payload: Any,
    *,
    params: Optional[Mapping[str, Any]] = None,
    resolution: Optional[str] = None,
) -> List[Dict[str, Any]]:
    prefer = "return=representation"
    if resolution:
        prefer += f",resolution={resolution}"
    return rest_request(conn, "POST", table, params=params, payload=payload, prefer=prefer)


def patch(conn: RestConnection, table: str, filters: Mapping[str, Any], payload: Any) -> List[Dict[str, Any]]:
    return rest_request(conn, "PATCH", table, params=filters, payload=payload)


def delete(conn: RestConnection, table: str, filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return rest_request(conn, "DELETE", table, params=filters)


def first_or_none(rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None


def normalize_time(value: Any) -> Optional[time]:
    """Normalize TIME values returned by the store.

    PostgREST returns TIME columns as strings ('08:30:00'); rows built in code may
    already hold ``datetime.time``.
    """

    if value is None or value == "":
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(float(parts[2])) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")
