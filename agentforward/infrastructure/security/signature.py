"""
Callback Signatures
HMAC-SHA256 signing of agent identifiers with the agent's shared secret.

The proxy engine calls the observer URL with ``?sign=<signature>``; the
reconciler verifies it before applying any event.
"""

import hashlib
import hmac
import secrets
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class SignatureCodec:
    """Sign and verify payloads with a per-agent secret."""

    digestmod = hashlib.sha256

    def sign(self, secret: str, payload: str) -> str:
        """
        Sign a payload.

        Args:
            secret: The agent's shared secret
            payload: Value to sign (the agent id)

        Returns:
            Hex-encoded HMAC digest
        """
        return hmac.new(
            secret.encode("utf-8"),
            payload.encode("utf-8"),
            self.digestmod,
        ).hexdigest()

    def verify(self, secret: str, payload: str, signature: Optional[str]) -> bool:
        """
        Verify a signature using constant-time comparison.

        Returns:
            True if the signature matches, False otherwise
        """
        if not signature:
            return False

        expected = self.sign(secret, payload)
        is_valid = secrets.compare_digest(expected, signature)

        if not is_valid:
            logger.warning(
                "signature_validation_failed",
                payload=payload,
                signature_prefix=signature[:8] + "..." if len(signature) > 8 else "***",
            )

        return is_valid


def generate_secret() -> str:
    """Generate a random agent secret (256 bits of entropy)."""
    return secrets.token_urlsafe(32)
