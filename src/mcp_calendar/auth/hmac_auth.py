import base64
import hashlib
import hmac
import secrets
import time

HMAC_CLOCK_SKEW = 300  # ±5 minutes

TIMESTAMP_HEADER = "x-agent-timestamp"
NONCE_HEADER = "x-agent-nonce"
SIGNATURE_HEADER = "x-agent-signature"


def _b64_hmac_sha256(key: bytes, message: bytes) -> str:
    mac = hmac.new(key, message, hashlib.sha256).digest()
    return base64.b64encode(mac).decode("ascii")


def build_canonical(ts: str, nonce: str, method: str, path_only: str, body: str) -> str:
    # The canonical string is: "{timestamp}\n{nonce}\n{METHOD}\n{PATH}\n{BODY}"
    return f"{ts}\n{nonce}\n{method.upper()}\n{path_only}\n{body}"


def sign_request(
    method: str,
    path_only: str,
    body: str,
    secret: str,
    *,
    now: int | None = None,
    nonce: str | None = None,
) -> dict[str, str]:
    """
    Build the HMAC headers for a request.

    Returns:
        dict[str, str]: Timestamp, nonce and base64 signature headers.
    """
    ts = str(int(now or time.time()))
    nonce = nonce or secrets.token_hex(16)
    canonical = build_canonical(ts, nonce, method, path_only, body)
    signature = _b64_hmac_sha256(secret.encode("utf-8"), canonical.encode("utf-8"))
    return {TIMESTAMP_HEADER: ts, NONCE_HEADER: nonce, SIGNATURE_HEADER: signature}


def verify_hmac_signature(
    ts_str: str,
    nonce: str,
    method: str,
    path_only: str,
    body: str,
    provided_sig_b64: str,
    secret: str,
    now: int | None = None,
    previous_secret: str | None = None,  # optional rotation
) -> tuple[bool, str]:
    """
    Returns (is_valid, reason_if_invalid).
    """
    # Timestamp window
    try:
        ts = int(ts_str)
    except (TypeError, ValueError):
        return False, "bad_timestamp"

    now = int(now or time.time())
    if abs(now - ts) > HMAC_CLOCK_SKEW:
        return False, "timestamp_skew"

    canonical = build_canonical(ts_str, nonce, method, path_only, body or "")
    expected = _b64_hmac_sha256(secret.encode("utf-8"), canonical.encode("utf-8"))

    if hmac.compare_digest(expected, provided_sig_b64):
        return True, ""

    if previous_secret:  # optional graceful rotation
        expected_prev = _b64_hmac_sha256(previous_secret.encode(), canonical.encode())
        if hmac.compare_digest(expected_prev, provided_sig_b64):
            return True, ""

    return False, "bad_signature"
