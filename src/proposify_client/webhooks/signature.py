"""HMAC-SHA256 signatures for Proposify webhook deliveries."""

import hmac
from hashlib import sha256


def compute_signature(payload: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the raw request body."""
    return hmac.new(secret.encode("utf-8"), payload, sha256).hexdigest()


def verify_signature(payload: bytes, signature: str | None, secret: str | None) -> bool:
    """Check a delivery signature.

    With no secret configured there is nothing to check and the delivery is
    accepted. Comparison is constant time.

    Args:
        payload: Raw request body, exactly as received
        signature: Hex digest from the signature header
        secret: Shared secret given to the provider at registration

    Returns:
        True if accepted
    """
    if not secret:
        return True
    if not signature:
        return False
    expected = compute_signature(payload, secret)
    return hmac.compare_digest(expected.encode("ascii"), signature.strip().lower().encode("utf-8"))
