"""
API response models for the Pixel Vault Service
"""

from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class StegoAPIResult(BaseModel):
    """
    Standard API response model for JSON endpoints
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class RevealedFile(BaseModel):
    name: str
    type: str
    data: str
    size_bytes: int


class RevealAPIResult(BaseModel):
    kind: str
    text: Optional[str] = None
    files: List[RevealedFile] = []
    payload_bits: int
