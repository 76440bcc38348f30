"""
Encryption utilities for Pixel Vault operations

Two envelope formats are supported, both printable base64 strings so that
every ciphertext character fits in one byte of the payload body:

- aes-gcm: base64(salt[16] || nonce[12] || ciphertext+tag), Scrypt KDF
- openssl: base64("Salted__" || salt[8] || AES-256-CBC), EVP_BytesToKey/MD5,
  the format produced by CryptoJS.AES.encrypt(text, passphrase)
"""

import base64
import binascii
import os
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..models.vault_models import CipherScheme
from .errors import DecryptionError


GCM_SALT_LEN = 16
GCM_NONCE_LEN = 12
GCM_TAG_LEN = 16

OPENSSL_MAGIC = b"Salted__"
OPENSSL_SALT_LEN = 8
AES_BLOCK_BITS = 128


def derive_key(password: str, salt: bytes) -> bytes:
    """
    Derive encryption key from password using Scrypt KDF

    Args:
        password: User password
        salt: Random salt for key derivation

    Returns:
        Derived 256-bit encryption key
    """
    kdf = Scrypt(salt=salt, length=32, n=2**14, r=8, p=1)
    return kdf.derive(password.encode("utf-8"))


def evp_bytes_to_key(password: bytes, salt: bytes, key_len: int = 32, iv_len: int = 16) -> Tuple[bytes, bytes]:
    """
    OpenSSL EVP_BytesToKey with MD5 and a single iteration

    Args:
        password: Password bytes
        salt: 8 byte salt from the envelope
        key_len: Key length in bytes
        iv_len: IV length in bytes

    Returns:
        Tuple of (key, iv)
    """
    derived = b""
    block = b""
    while len(derived) < key_len + iv_len:
        digest = hashes.Hash(hashes.MD5())
        digest.update(block + password + salt)
        block = digest.finalize()
        derived += block
    return derived[:key_len], derived[key_len : key_len + iv_len]


def _b64decode(ciphertext: str) -> bytes:
    try:
        return base64.b64decode(ciphertext.encode("ascii"), validate=True)
    except (UnicodeEncodeError, binascii.Error) as exc:
        raise DecryptionError("Ciphertext is not valid base64") from exc


def _decode_plaintext(raw: bytes) -> str:
    # A wrong key can still pass the padding check
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecryptionError() from exc
    if not text:
        raise DecryptionError("Decryption failed. Check your password.")
    return text


def _encrypt_gcm(data: bytes, password: str) -> bytes:
    salt = os.urandom(GCM_SALT_LEN)
    nonce = os.urandom(GCM_NONCE_LEN)
    aesgcm = AESGCM(derive_key(password, salt))
    return salt + nonce + aesgcm.encrypt(nonce, data, None)


def _decrypt_gcm(blob: bytes, password: str) -> bytes:
    if len(blob) < GCM_SALT_LEN + GCM_NONCE_LEN + GCM_TAG_LEN:
        raise DecryptionError("Ciphertext is too short")
    salt = blob[:GCM_SALT_LEN]
    nonce = blob[GCM_SALT_LEN : GCM_SALT_LEN + GCM_NONCE_LEN]
    try:
        aesgcm = AESGCM(derive_key(password, salt))
        return aesgcm.decrypt(nonce, blob[GCM_SALT_LEN + GCM_NONCE_LEN :], None)
    except InvalidTag as exc:
        raise DecryptionError() from exc


def _encrypt_openssl(data: bytes, password: str) -> bytes:
    salt = os.urandom(OPENSSL_SALT_LEN)
    key, iv = evp_bytes_to_key(password.encode("utf-8"), salt)
    padder = padding.PKCS7(AES_BLOCK_BITS).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return OPENSSL_MAGIC + salt + encryptor.update(padded) + encryptor.finalize()


def _decrypt_openssl(blob: bytes, password: str) -> bytes:
    header_len = len(OPENSSL_MAGIC) + OPENSSL_SALT_LEN
    if not blob.startswith(OPENSSL_MAGIC) or len(blob) <= header_len:
        raise DecryptionError("Ciphertext is missing the salted envelope")
    body = blob[header_len:]
    if len(body) % (AES_BLOCK_BITS // 8):
        raise DecryptionError("Ciphertext length is not a whole number of blocks")
    key, iv = evp_bytes_to_key(password.encode("utf-8"), blob[len(OPENSSL_MAGIC) : header_len])
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(body) + decryptor.finalize()
    unpadder = padding.PKCS7(AES_BLOCK_BITS).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise DecryptionError() from exc


def encrypt(plaintext: str, password: str, scheme: CipherScheme = CipherScheme.AES_GCM) -> str:
    """
    Encrypt a string into a self-contained printable ciphertext

    A fresh salt (and nonce) is drawn on every call, so encrypting the
    same input twice gives different output.

    Args:
        plaintext: Text to encrypt
        password: Password for encryption
        scheme: Envelope format to produce

    Returns:
        Base64 ciphertext string
    """
    data = plaintext.encode("utf-8")
    if scheme == CipherScheme.OPENSSL:
        blob = _encrypt_openssl(data, password)
    else:
        blob = _encrypt_gcm(data, password)
    return base64.b64encode(blob).decode("ascii")


def decrypt(ciphertext: str, password: str, scheme: CipherScheme = CipherScheme.AES_GCM) -> str:
    """
    Decrypt a ciphertext produced by encrypt()

    Args:
        ciphertext: Base64 ciphertext string
        password: Password for decryption
        scheme: Envelope format the ciphertext uses

    Returns:
        Decrypted text

    Raises:
        DecryptionError: If the password is wrong, the ciphertext is malformed,
            or the result is empty or not valid UTF-8
    """
    blob = _b64decode(ciphertext)
    if scheme == CipherScheme.OPENSSL:
        raw = _decrypt_openssl(blob, password)
    else:
        raw = _decrypt_gcm(blob, password)
    return _decode_plaintext(raw)


def ciphertext_length(plaintext_bytes: int, scheme: CipherScheme = CipherScheme.AES_GCM) -> int:
    """
    Number of ciphertext characters produced for a plaintext of the given size

    Args:
        plaintext_bytes: UTF-8 length of the plaintext
        scheme: Envelope format

    Returns:
        Length of the base64 ciphertext string
    """
    if scheme == CipherScheme.OPENSSL:
        block = AES_BLOCK_BITS // 8
        blob_len = len(OPENSSL_MAGIC) + OPENSSL_SALT_LEN + (plaintext_bytes // block + 1) * block
    else:
        blob_len = GCM_SALT_LEN + GCM_NONCE_LEN + plaintext_bytes + GCM_TAG_LEN
    return 4 * ((blob_len + 2) // 3)


def max_plaintext_bytes(max_ciphertext_chars: int, scheme: CipherScheme = CipherScheme.AES_GCM) -> int:
    """
    Largest plaintext size whose ciphertext fits in the given number of characters

    Args:
        max_ciphertext_chars: Ciphertext characters available
        scheme: Envelope format

    Returns:
        Plaintext size in bytes, 0 when nothing fits
    """
    blob_budget = 3 * (max_ciphertext_chars // 4)
    if scheme == CipherScheme.OPENSSL:
        block = AES_BLOCK_BITS // 8
        blocks = (blob_budget - len(OPENSSL_MAGIC) - OPENSSL_SALT_LEN) // block
        return max(0, blocks * block - 1)
    return max(0, blob_budget - GCM_SALT_LEN - GCM_NONCE_LEN - GCM_TAG_LEN)
