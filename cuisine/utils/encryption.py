"""
Password-based authenticated encryption for exported backups.

Blob layout: ``CUISINE_ENC_V1`` header, 16-byte salt, 12-byte nonce, then the
AES-256-GCM ciphertext with its 16-byte tag appended.
"""

import logging
import os
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .error_handler import DecryptionError, EncryptionError

logger = logging.getLogger(__name__)

ENCRYPTION_HEADER = b"CUISINE_ENC_V1"
SALT_LENGTH = 16
IV_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32  # AES-256
DEFAULT_KDF_ITERATIONS = 100000

_MIN_BLOB_LENGTH = len(ENCRYPTION_HEADER) + SALT_LENGTH + IV_LENGTH + TAG_LENGTH


class BackupEncryption:
    """
    Encrypts and decrypts serialized backups with a key derived from a user
    password. Salt and nonce are fresh for every call.
    """

    def __init__(self, iterations: int = DEFAULT_KDF_ITERATIONS):
        if iterations < 1:
            raise EncryptionError("KDF iteration count must be positive")
        self.iterations = iterations
        self._backend = default_backend()

    def _derive_key(self, password: str, salt: bytes) -> bytes:
        """
        Derive the AES key from a password using PBKDF2-HMAC-SHA256.

        Args:
            password: User password
            salt: Per-blob random salt

        Returns:
            32-byte key
        """
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=self.iterations,
            backend=self._backend
        )
        return kdf.derive(password.encode('utf-8'))

    def encrypt(self, plaintext: str, password: str) -> bytes:
        """
        Encrypt a serialized backup.

        Args:
            plaintext: Backup JSON text
            password: User password

        Returns:
            Encrypted blob (header, salt, nonce, ciphertext and tag)

        Raises:
            EncryptionError: If the inputs are not strings
        """
        if not isinstance(plaintext, str):
            raise EncryptionError("Backup content must be a string")
        if not isinstance(password, str):
            raise EncryptionError("Password must be a string")

        salt = os.urandom(SALT_LENGTH)
        iv = os.urandom(IV_LENGTH)
        key = self._derive_key(password, salt)

        encryptor = Cipher(
            algorithms.AES(key),
            modes.GCM(iv),
            backend=self._backend
        ).encryptor()
        ciphertext = encryptor.update(plaintext.encode('utf-8')) + encryptor.finalize()

        return ENCRYPTION_HEADER + salt + iv + ciphertext + encryptor.tag

    def decrypt(self, data: bytes, password: str) -> str:
        """
        Decrypt a blob produced by :meth:`encrypt`.

        Raises:
            DecryptionError: On any failure. Wrong password, truncation and
                tampering all surface the same way and no partial plaintext
                is ever returned.
        """
        if not self.is_encrypted(data) or not isinstance(password, str):
            raise DecryptionError()

        blob = bytes(data)
        if len(blob) < _MIN_BLOB_LENGTH:
            raise DecryptionError()

        offset = len(ENCRYPTION_HEADER)
        salt = blob[offset:offset + SALT_LENGTH]
        iv = blob[offset + SALT_LENGTH:offset + SALT_LENGTH + IV_LENGTH]
        ciphertext = blob[offset + SALT_LENGTH + IV_LENGTH:-TAG_LENGTH]
        tag = blob[-TAG_LENGTH:]

        key = self._derive_key(password, salt)
        decryptor = Cipher(
            algorithms.AES(key),
            modes.GCM(iv, tag),
            backend=self._backend
        ).decryptor()

        try:
            plaintext = decryptor.update(ciphertext) + decryptor.finalize()
            return plaintext.decode('utf-8')
        except (InvalidTag, UnicodeDecodeError):
            logger.warning("Backup decryption failed")
            raise DecryptionError() from None

    @staticmethod
    def is_encrypted(data: Any) -> bool:
        """Whether ``data`` starts with the encrypted-backup header."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            return False
        return bytes(data[:len(ENCRYPTION_HEADER)]) == ENCRYPTION_HEADER


_default_encryption = BackupEncryption()


def encrypt_backup(json_text: str, password: str) -> bytes:
    """Encrypt a serialized backup with the default parameters."""
    return _default_encryption.encrypt(json_text, password)


def decrypt_backup(data: bytes, password: str) -> str:
    """Decrypt a backup blob; raises DecryptionError on any failure."""
    return _default_encryption.decrypt(data, password)


def is_encrypted_backup(data: Any) -> bool:
    return BackupEncryption.is_encrypted(data)
