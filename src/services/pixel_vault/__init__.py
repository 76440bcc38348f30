"""
Pixel Vault Service - Password-shuffled LSB steganography

Hides text or file bundles in the least significant bits of an image:
- Password-based encryption (AES-GCM, or the OpenSSL salted envelope)
- Password-seeded pixel order, so payload bits are scattered
- 32-bit length-prefixed framing of the ciphertext
- PNG output that keeps every embedded bit
"""

__version__ = "1.0.0"
__author__ = "Pixel Vault Team"
