"""
Server-side Encryption Service
Checklist text is encrypted before it is written and decrypted when read back.
"""
import base64
import binascii
import logging
from typing import Optional
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)


class EncryptionService:
    """Symmetric encryption of stored user text"""

    def __init__(self, secret_key: str):
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=b'brainsort_encryption_salt_v1',
            iterations=100000,
        )
        key = base64.urlsafe_b64encode(kdf.derive(secret_key.encode()))
        self.cipher = Fernet(key)

    def encrypt(self, data: str) -> str:
        if not data:
            return data
        encrypted = self.cipher.encrypt(data.encode())
        return base64.urlsafe_b64encode(encrypted).decode()

    def decrypt(self, encrypted_data: str) -> str:
        """Decrypt a value; plaintext written before encryption was enabled is returned as is"""
        if not encrypted_data:
            return encrypted_data
        try:
            decoded = base64.urlsafe_b64decode(encrypted_data.encode())
            return self.cipher.decrypt(decoded).decode()
        except (binascii.Error, InvalidToken, ValueError):
            logger.debug("Value is not encrypted, returning as stored")
            return encrypted_data

    def encrypt_checklist(self, checklist_dict: dict) -> dict:
        encrypted = checklist_dict.copy()
        if encrypted.get('checklist'):
            encrypted['checklist'] = [
                {**item, 'text': self.encrypt(item['text'])}
                for item in encrypted['checklist']
            ]
        return encrypted

    def decrypt_checklist(self, checklist_dict: dict) -> dict:
        decrypted = checklist_dict.copy()
        if decrypted.get('checklist'):
            decrypted['checklist'] = [
                {**item, 'text': self.decrypt(item['text'])}
                for item in decrypted['checklist']
            ]
        return decrypted


# Singleton instance
_encryption_service: Optional[EncryptionService] = None


def init_encryption(secret_key: str):
    global _encryption_service
    _encryption_service = EncryptionService(secret_key)


def get_encryption() -> EncryptionService:
    if _encryption_service is None:
        raise RuntimeError("Encryption not initialized. Call init_encryption() first.")
    return _encryption_service
