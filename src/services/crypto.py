"""
Seed Crypto - Encryption of stored seed phrases.

- Argon2id key derivation (memory-hard)
- AES-256-GCM authenticated encryption

Seed phrases of secured wallets never exist unencrypted on disk.
"""

import base64
import os
import secrets
from pathlib import Path

from argon2.low_level import hash_secret_raw, Type
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from eth_account.hdaccount import generate_mnemonic
from eth_account.hdaccount.mnemonic import Language
from mnemonic import Mnemonic


# ============================================
# Security Constants
# ============================================

# Argon2id parameters (OWASP recommendations for high-security)
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # 64 MB
ARGON2_PARALLELISM = 4
ARGON2_HASH_LEN = 32  # 256 bits for AES-256

AES_IV_SIZE = 12  # 96 bits (recommended for GCM)
SALT_SIZE = 16

SEED_WORD_COUNT = 12

# Secure file permissions (Unix only)
SECURE_FILE_MODE = 0o600  # Owner read/write only


def set_secure_permissions(filepath: Path) -> None:
    """
    Set restrictive file permissions on Unix systems.

    No-op on Windows (NTFS uses ACLs, not Unix permissions).
    """
    if os.name == 'posix':
        try:
            os.chmod(filepath, SECURE_FILE_MODE)
        except OSError:
            pass


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive an AES key from password using Argon2id."""
    return hash_secret_raw(
        secret=password.encode('utf-8'),
        salt=salt,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
        hash_len=ARGON2_HASH_LEN,
        type=Type.ID
    )


def encrypt_seed(seed_phrase: str, password: str) -> dict:
    """
    Encrypt a seed phrase with a password.

    Returns a JSON-ready dict of base64 fields: ciphertext, iv, salt.
    The GCM tag is kept at the end of the ciphertext.
    """
    salt = secrets.token_bytes(SALT_SIZE)
    iv = secrets.token_bytes(AES_IV_SIZE)
    aesgcm = AESGCM(derive_key(password, salt))
    ciphertext = aesgcm.encrypt(iv, seed_phrase.encode('utf-8'), None)
    return {
        "ciphertext": base64.b64encode(ciphertext).decode('ascii'),
        "iv": base64.b64encode(iv).decode('ascii'),
        "salt": base64.b64encode(salt).decode('ascii'),
    }


def decrypt_seed(payload: dict, password: str) -> str:
    """
    Decrypt a payload produced by encrypt_seed.

    Raises: ValueError if the password is wrong or the data is tampered.
    """
    try:
        ciphertext = base64.b64decode(payload["ciphertext"])
        iv = base64.b64decode(payload["iv"])
        salt = base64.b64decode(payload["salt"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Corrupt wallet data: {e}") from e

    aesgcm = AESGCM(derive_key(password, salt))
    try:
        plaintext = aesgcm.decrypt(iv, ciphertext, None)
    except InvalidTag:
        raise ValueError("Wrong password")
    return plaintext.decode('utf-8')


def new_seed_phrase(word_count: int = SEED_WORD_COUNT) -> str:
    """Generate a BIP-39 English mnemonic."""
    return generate_mnemonic(word_count, Language.ENGLISH)


def is_valid_seed_phrase(seed_phrase: str) -> bool:
    """Check BIP-39 word list membership and checksum."""
    words = seed_phrase.strip().lower().split()
    if len(words) not in (12, 15, 18, 21, 24):
        return False
    return Mnemonic("english").check(" ".join(words))
