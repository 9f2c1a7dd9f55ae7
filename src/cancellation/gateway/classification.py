"""
Response classification.

Maps raw transport outcomes (HTTP status + body, or transport errors) onto
the four-way StrategyResult taxonomy. This is the only place where status
codes and error bodies are interpreted.

403 is treated as a role/capability mismatch (NOT_SUPPORTED) unless the
body carries an explicit denial code, in which case it is a business
REJECTED. 409 always means the booking's state forbids the cancellation.
"""
from typing import Any, Iterable, Optional

from .results import StrategyResult

NOT_SUPPORTED_STATUSES = {400, 401, 403, 404, 405, 410, 415, 422, 501}
TRANSIENT_STATUSES = {408, 425, 429}
REJECTED_STATUSES = {409}
# Statuses on which an explicit denial code in the body turns into REJECTED
DENIAL_ELIGIBLE_STATUSES = {400, 403, 409, 422}


def extract_message(body: Any) -> Optional[str]:
    """Pull a human-readable explanation out of an error body."""
    if isinstance(body, dict):
        for key in ("message", "error_description", "detail", "error", "reason"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, list) and value:
                return "; ".join(str(item) for item in value)
        return None
    if isinstance(body, str) and body.strip():
        return body.strip()[:500]
    return None


def has_denial_code(body: Any, denial_codes: Iterable[str]) -> bool:
    if not isinstance(body, dict):
        return False
    codes = {code.upper() for code in denial_codes}
    for key in ("code", "error", "errorCode"):
        value = body.get(key)
        if isinstance(value, str) and value.upper() in codes:
            return True
    return False


def classify_response(status_code: int, body: Any = None,
                      denial_codes: Iterable[str] = ()) -> StrategyResult:
    """
    Classify an HTTP response.

    Args:
        status_code: HTTP status code
        body: Parsed JSON body (dict/list), raw text, or None
        denial_codes: Body error codes that mark an explicit business denial

    Returns:
        StrategyResult
    """
    if 200 <= status_code < 300:
        if isinstance(body, dict):
            payload = body
        elif body is None or body == "":
            payload = {}
        elif isinstance(body, str):
            payload = {"raw": body}
        else:
            payload = {"data": body}
        return StrategyResult.success(payload, status_code=status_code)

    message = extract_message(body)

    if status_code in DENIAL_ELIGIBLE_STATUSES and has_denial_code(body, denial_codes):
        return StrategyResult.rejected(
            message or "The cancellation was declined.", status_code=status_code)

    if status_code in REJECTED_STATUSES:
        return StrategyResult.rejected(
            message or "The booking can no longer be cancelled.", status_code=status_code)

    if status_code in NOT_SUPPORTED_STATUSES:
        return StrategyResult.not_supported(message, status_code=status_code)

    if status_code in TRANSIENT_STATUSES or status_code >= 500:
        return StrategyResult.transient(message, status_code=status_code)

    # Remaining 3xx/4xx: the endpoint is not usable as called
    return StrategyResult.not_supported(message, status_code=status_code)
