"""
Patch History Service Layer

REST client for the patch history of a backend project.

API endpoints (relative to HISTORY_API_BASE_URL, all with Authorization: Bearer <key>):
    GET  /api/projects/{project_id}/patches   — list history records
    POST /api/projects/{project_id}/patches   — save a record, returns {version}
    POST /api/projects/{project_id}/rollback  — roll back to before a patch

EXTERNAL DEPENDENCY POLICY:
- One request per call. No retry, no cache, no batching.
- Non-2xx status → TransportError (checked before the body is read)
- Network failure / timeout → TransportError (status_code=None)
- 2xx with non-JSON body → InvalidResponseError
- Rollback with embedded code != 200 → ApplicationError
- Nothing is caught here; every failure propagates to the caller.

RESPONSE SHAPES:
The canonical body is the envelope {"code": 200, "data": ...}. Bare bodies
(a list for fetch, {"version": n} for save) are still accepted for older
backends and logged as DEPRECATED_RESPONSE_SHAPE.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

import config
from app.services.history.exceptions import (
    TransportError,
    ApplicationError,
    InvalidResponseError,
)
from app.services.history.models import PatchHistoryRecord, SaveResult

logger = logging.getLogger(__name__)

SUCCESS_CODE = 200
ROLLBACK_FAILED_MESSAGE = "Rollback failed"


def _project_url(project_id: str, resource: str) -> str:
    return f"{config.get_api_base_url()}/api/projects/{project_id}/{resource}"


def _get_auth_headers(json_body: bool = False) -> Dict[str, str]:
    """Bearer auth headers; resolved per call so key rotation needs no restart."""
    headers = {"Authorization": f"Bearer {config.get_api_key()}"}
    if json_body:
        headers["Content-Type"] = "application/json"
    return headers


def _is_envelope_ok(body: Any) -> bool:
    return isinstance(body, dict) and body.get("code") == SUCCESS_CODE


async def _send(
    method: str,
    url: str,
    *,
    operation: str,
    failure_prefix: str,
    json_body: Optional[Any] = None,
) -> Any:
    """
    Perform one HTTP request and return the decoded JSON body.

    Raises:
        TransportError: On network failure, timeout or non-2xx status
        InvalidResponseError: If a 2xx body is not valid JSON
    """
    headers = _get_auth_headers(json_body=json_body is not None)
    timeout = httpx.Timeout(config.get_http_timeout())

    logger.info(f"history_api {operation}: START [method={method}, url={url}]")
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.request(method, url, headers=headers, json=json_body)
    except httpx.HTTPError as e:
        logger.error(f"history_api {operation}: NETWORK_ERROR [url={url}, error={e!r}]")
        raise TransportError(f"{failure_prefix}: {e}") from e

    logger.info(f"history_api {operation}: RESPONSE [status={response.status_code}]")

    if not response.is_success:
        status_text = response.reason_phrase
        logger.error(
            f"history_api {operation}: HTTP_ERROR [status={response.status_code}, "
            f"response_preview={response.text[:200]}]"
        )
        raise TransportError(
            f"{failure_prefix}: {status_text}",
            status_code=response.status_code,
            status_text=status_text,
        )

    try:
        return response.json()
    except ValueError as e:
        error_msg = f"Invalid JSON response: {response.text[:200]}"
        logger.error(f"history_api {operation}: INVALID_JSON [{error_msg}]")
        raise InvalidResponseError(error_msg) from e


# ====================================================================================
# Fetch
# ====================================================================================

async def fetch_history(project_id: str = config.DEFAULT_PROJECT_ID) -> List[PatchHistoryRecord]:
    """
    Fetch the patch history of a project.

    Records are returned exactly as the backend sent them; individual record
    shapes are not validated.

    Args:
        project_id: Backend project identifier

    Returns:
        List of records. Empty if the body has neither recognised shape.

    Raises:
        TransportError: If the request fails or the status is not 2xx
        InvalidResponseError: If the body is not JSON
    """
    body = await _send(
        "GET",
        _project_url(project_id, "patches"),
        operation="fetch_history",
        failure_prefix="Failed to fetch history",
    )

    if _is_envelope_ok(body) and isinstance(body.get("data"), list):
        return body["data"]

    if isinstance(body, list):
        logger.warning(f"history_api fetch_history: DEPRECATED_RESPONSE_SHAPE [shape=bare_list, project={project_id}]")
        return body

    logger.warning(
        f"history_api fetch_history: UNEXPECTED_RESPONSE [project={project_id}, "
        f"code={body.get('code') if isinstance(body, dict) else None}]"
    )
    return []


# ====================================================================================
# Save
# ====================================================================================

async def save_history(
    record: Mapping[str, Any],
    project_id: str = config.DEFAULT_PROJECT_ID,
) -> SaveResult:
    """
    Save a patch record to the backend.

    The record is serialized as-is and never modified.

    Args:
        record: PatchHistoryRecord to store
        project_id: Backend project identifier

    Returns:
        {"version": int} as reported by the backend

    Raises:
        TransportError: If the request fails or the status is not 2xx
        InvalidResponseError: If the body is not JSON
    """
    body = await _send(
        "POST",
        _project_url(project_id, "patches"),
        operation="save_history",
        failure_prefix="Failed to save patch",
        json_body=dict(record),
    )

    if _is_envelope_ok(body) and body.get("data"):
        return body["data"]

    logger.warning(f"history_api save_history: DEPRECATED_RESPONSE_SHAPE [shape=bare_body, project={project_id}]")
    return body


# ====================================================================================
# Rollback
# ====================================================================================

async def rollback_patch(target_patch_id: str, project_id: str = config.DEFAULT_PROJECT_ID) -> None:
    """
    Roll the project back to the state just before target_patch_id.

    Args:
        target_patch_id: id of the patch to roll back to
        project_id: Backend project identifier

    Raises:
        TransportError: If the request fails or the status is not 2xx
        InvalidResponseError: If the body is not JSON
        ApplicationError: If the body carries a code other than 200
    """
    body = await _send(
        "POST",
        _project_url(project_id, "rollback"),
        operation="rollback_patch",
        failure_prefix="Failed to rollback",
        json_body={"target_patch_id": target_patch_id},
    )

    if isinstance(body, dict) and "code" in body and body["code"] != SUCCESS_CODE:
        message = body.get("message") or ROLLBACK_FAILED_MESSAGE
        logger.error(
            f"history_api rollback_patch: APPLICATION_ERROR [project={project_id}, "
            f"target={target_patch_id}, code={body['code']}, message={message}]"
        )
        raise ApplicationError(message, code=body["code"])

    logger.info(f"history_api rollback_patch: SUCCESS [project={project_id}, target={target_patch_id}]")
