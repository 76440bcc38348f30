from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Iterable, List, Literal, Optional, Tuple, Union

import numpy as np
from PIL import Image
from pydantic import BaseModel, Field

from ..core.errors import ContentParseError


CHANNELS_PER_PIXEL = 3  # R, G, B; alpha is never touched
HEADER_BITS = 32


class CipherScheme(str, Enum):
    AES_GCM = "aes-gcm"
    OPENSSL = "openssl"


class ContentKind(str, Enum):
    TEXT = "text"
    BUNDLE = "bundle"


@dataclass(frozen=True, eq=False)
class CoverImage:
    """
    RGBA8 pixel buffer of shape (height, width, 4)

    The buffer is made read-only on construction; embedding always
    produces a new CoverImage.
    """

    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4 or self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected a uint8 RGBA buffer of shape (H, W, 4), got {self.pixels.dtype} {self.pixels.shape}")
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def capacity(self) -> int:
        return self.pixel_count * CHANNELS_PER_PIXEL

    @classmethod
    def from_image(cls, image: Image.Image) -> "CoverImage":
        rgba = image.convert("RGBA")
        return cls(np.array(rgba, dtype=np.uint8))

    @classmethod
    def blank(cls, width: int, height: int, fill: Tuple[int, int, int, int] = (0, 0, 0, 255)) -> "CoverImage":
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = fill
        return cls(pixels)

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.array(self.pixels))


class BundledFile(BaseModel):
    name: str
    type: str = ""
    data: str = Field(description="Base64 encoded file content")

    def content(self) -> bytes:
        try:
            return base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ContentParseError(f"File '{self.name}' carries invalid base64 data") from exc


class PlainText(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class FileBundle(BaseModel):
    kind: Literal["bundle"] = "bundle"
    files: List[BundledFile] = Field(default_factory=list)

    @classmethod
    def from_files(cls, files: Iterable[Tuple[str, str, bytes]]) -> "FileBundle":
        return cls(
            files=[
                BundledFile(name=name, type=mime_type or "", data=base64.b64encode(data).decode("ascii"))
                for name, mime_type, data in files
            ]
        )


VaultContent = Annotated[Union[PlainText, FileBundle], Field(discriminator="kind")]


class CapacityResult(BaseModel):
    width: int
    height: int
    capacity_bits: int
    capacity_bytes: int
    header_bits: int = HEADER_BITS
    max_ciphertext_chars: int
    max_text_bytes: int = Field(description="Approximate UTF-8 bytes of text that fit with the active cipher")
    cipher: CipherScheme


class HideResult(BaseModel):
    width: int
    height: int
    used_capacity_bits: int
    capacity_bits: int
    ciphertext_chars: int
    content_kind: ContentKind
    cipher: CipherScheme

    @property
    def utilization(self) -> float:
        if self.capacity_bits == 0:
            return 0.0
        return self.used_capacity_bits / self.capacity_bits


class RevealResult(BaseModel):
    content: VaultContent
    payload_bits: int
    cipher: CipherScheme

    @property
    def kind(self) -> ContentKind:
        return ContentKind(self.content.kind)

    @property
    def text(self) -> Optional[str]:
        if isinstance(self.content, PlainText):
            return self.content.text
        return None
