"""
Webhook authentication for the GitHub App endpoint.

GitHub signs every delivery with HMAC SHA-256 over the raw body, keyed by the
App's webhook secret, and sends it as `X-Hub-Signature-256: sha256=<hex>`.
"""

import hashlib
import hmac
import logging

from fastapi import HTTPException, Request

from reviewgate.core.config import config

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def sign_payload(secret: str, payload: bytes) -> str:
    """Return the header value GitHub would send for this payload."""
    digest = hmac.new(secret.encode(), msg=payload, digestmod=hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def is_valid_signature(secret: str, payload: bytes, signature: str) -> bool:
    """Constant-time comparison of a received signature with the expected one."""
    if not signature.startswith(SIGNATURE_PREFIX):
        return False
    return hmac.compare_digest(signature, sign_payload(secret, payload))


async def verify_github_signature(request: Request) -> bool:
    """
    FastAPI dependency that rejects deliveries not signed with our webhook secret.

    The secret is read per request, so an unset secret rejects everything
    rather than accepting unsigned payloads.

    Raises:
        HTTPException: 401 if the signature is missing or invalid, or no secret is configured.
    """
    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        logger.warning(f"Received a request without the {SIGNATURE_HEADER} header.")
        raise HTTPException(status_code=401, detail="Missing GitHub webhook signature.")

    secret = config.github.webhook_secret
    if not secret:
        logger.error("WEBHOOK_SECRET_GITHUB is not configured, rejecting webhook.")
        raise HTTPException(status_code=401, detail="Webhook secret is not configured.")

    if not is_valid_signature(secret, await request.body(), signature):
        logger.error("Invalid webhook signature.")
        raise HTTPException(status_code=401, detail="Invalid GitHub webhook signature.")

    return True
