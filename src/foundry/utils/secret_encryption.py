"""Sealed-box encryption of GitHub Actions secrets.

GitHub requires secret values to be encrypted with a libsodium sealed box
against the repository public key before upload. A sealed box generates a
fresh ephemeral keypair per message, so encrypting the same value twice
never yields the same ciphertext.
"""

from __future__ import annotations

from nacl import bindings, encoding, public
from pydantic import SecretStr

_sodium_ready = False


async def ensure_sodium_ready() -> None:
    """Initialize libsodium once. Safe to await any number of times."""
    global _sodium_ready
    if not _sodium_ready:
        bindings.sodium_init()
        _sodium_ready = True


async def encrypt_secret(public_key: str, secret_value: str | SecretStr) -> str:
    """Encrypt a secret value for the repository owning ``public_key``.

    Args:
        public_key: Base64-encoded repository public key from the GitHub API.
        secret_value: Plaintext to encrypt.

    Returns:
        Base64-encoded sealed box, ready for the create-or-update secret call.
    """
    await ensure_sodium_ready()

    if isinstance(secret_value, SecretStr):
        secret_value = secret_value.get_secret_value()

    key = public.PublicKey(public_key.encode("utf-8"), encoding.Base64Encoder)
    sealed = public.SealedBox(key).encrypt(secret_value.encode("utf-8"))
    return encoding.Base64Encoder.encode(sealed).decode("utf-8")
