"""
RSA key generation.

Every key in a provisioning run, CA and leaves alike, comes from here.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives.asymmetric import rsa

from ..constants import DEFAULT_RSA_KEY_SIZE, MIN_RSA_KEY_SIZE, RSA_PUBLIC_EXPONENT
from ..exceptions import KeyGenerationError

logger = logging.getLogger(__name__)


class KeyPairGenerator:
    """Generates RSA private keys from the OS CSPRNG.

    Example:
        >>> key = KeyPairGenerator().generate()
        >>> key.key_size
        2048
    """

    def __init__(self, key_size: int = DEFAULT_RSA_KEY_SIZE) -> None:
        if key_size < MIN_RSA_KEY_SIZE:
            raise ValueError(
                f"RSA key size must be at least {MIN_RSA_KEY_SIZE} bits, got {key_size}"
            )
        self.key_size = key_size

    def generate(self) -> rsa.RSAPrivateKey:
        """Generate a new RSA private key.

        Returns:
            A fresh ``RSAPrivateKey``.

        Raises:
            KeyGenerationError: If the crypto backend fails to produce a key.
        """
        try:
            key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=self.key_size,
            )
        except Exception as exc:
            raise KeyGenerationError(f"generate RSA-{self.key_size} key failed: {exc}") from exc
        logger.debug("Generated RSA-%d private key", self.key_size)
        return key
