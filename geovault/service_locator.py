"""Service locator for components built at startup."""

from typing import Optional

from geovault.crypto import CryptoEngine

_crypto_engine: Optional[CryptoEngine] = None


def set_crypto_engine(engine: Optional[CryptoEngine]):
    """Set global crypto engine instance"""
    global _crypto_engine
    _crypto_engine = engine


def get_crypto_engine() -> CryptoEngine:
    """
    Get global crypto engine instance.

    Raises:
        RuntimeError: If called before application startup installed an engine
    """
    if _crypto_engine is None:
        raise RuntimeError("Crypto engine not initialized; application startup has not run")
    return _crypto_engine
