"""
Image utility functions for Pixel Vault operations
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import httpx
from PIL import Image, UnidentifiedImageError

from ..core.errors import ImageDecodeError, ImageEncodeError
from ..models.vault_models import CoverImage
from src.utility.constants_manager import ConstantsManager


logger = logging.getLogger(__name__)


def load_image_from_input(
    file: Optional[BytesIO] = None,
    url: Optional[str] = None,
    path: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
) -> Image.Image:
    """
    Load an image from a file object, URL or filesystem path

    Args:
        file: BytesIO object containing image data
        url: URL to fetch image from
        path: Path of an image on disk
        timeout: HTTP timeout in seconds for URL downloads

    Returns:
        PIL Image object with its pixel data loaded

    Raises:
        ImageDecodeError: If the image cannot be fetched or decoded
        ValueError: If no source is provided
    """
    if file is None and url is None and path is None:
        raise ValueError("Provide file, url or path")

    try:
        if file is not None:
            image = Image.open(file)
        elif url is not None:
            with httpx.Client(timeout=timeout or ConstantsManager().get_http_timeout()) as client:
                resp = client.get(url)
                resp.raise_for_status()
                image = Image.open(BytesIO(resp.content))
        else:
            image = Image.open(path)
        image.load()
    except httpx.HTTPError as exc:
        raise ImageDecodeError(f"Failed to fetch image: {exc}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageDecodeError("Failed to load image. The file is not a supported image format.") from exc
    return image


def load_cover_image(
    file: Optional[BytesIO] = None,
    url: Optional[str] = None,
    path: Optional[Union[str, Path]] = None,
    max_pixels: Optional[int] = None,
) -> CoverImage:
    """
    Load an image and convert it to an RGBA8 pixel buffer

    Args:
        file: BytesIO object containing image data
        url: URL to fetch image from
        path: Path of an image on disk
        max_pixels: Largest accepted pixel count, defaults to the configured limit

    Returns:
        CoverImage holding the pixel buffer
    """
    image = load_image_from_input(file=file, url=url, path=path)
    limit = max_pixels if max_pixels is not None else ConstantsManager().get_max_cover_pixels()
    width, height = image.size
    if limit and width * height > limit:
        raise ImageDecodeError(f"Cover image exceeds allowed pixel count: {width * height} > {limit}")
    if image.format == "JPEG":
        logger.warning("Loaded a JPEG image; hidden data survives only if the result is saved losslessly")
    return CoverImage.from_image(image)


def encode_png(cover: CoverImage) -> bytes:
    """
    Encode a pixel buffer as lossless PNG

    Raises:
        ImageEncodeError: If Pillow fails to write the image
    """
    buffer = BytesIO()
    try:
        cover.to_image().save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise ImageEncodeError(f"Failed to encode PNG: {exc}") from exc
    return buffer.getvalue()


def save_png(cover: CoverImage, path: Union[str, Path]) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(encode_png(cover))
    return out_path
