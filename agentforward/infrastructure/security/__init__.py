"""Infrastructure Security - Callback signing."""

from agentforward.infrastructure.security.signature import SignatureCodec, generate_secret

__all__ = ["SignatureCodec", "generate_secret"]
