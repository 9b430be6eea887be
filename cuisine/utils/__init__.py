"""
Utility functions and classes for the cuisine backup subsystem.
"""

from .validators import FieldValidator
from .serialization import DataSerializer, JSONEncoder
from .encryption import BackupEncryption, encrypt_backup, decrypt_backup, is_encrypted_backup
from .error_handler import CuisineError, DecryptionError, InvalidBackupError

__all__ = [
    'FieldValidator',
    'DataSerializer', 'JSONEncoder',
    'BackupEncryption', 'encrypt_backup', 'decrypt_backup', 'is_encrypted_backup',
    'CuisineError', 'DecryptionError', 'InvalidBackupError',
]
