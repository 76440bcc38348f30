"""
API routes for the Pixel Vault Service
"""

import logging
import traceback
from io import BytesIO
from typing import List, Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response

from ..core.errors import CapacityExceededError, DecryptionError, InvalidLengthError, StegoError
from ..core.service import PixelVaultService
from ..models.vault_models import CapacityResult, FileBundle, HideResult
from ..utils.image_utils import encode_png, load_cover_image
from .responses import RevealAPIResult, RevealedFile, StegoAPIResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vault", tags=["vault"])

# Service instance
stego_service = PixelVaultService()


def send_response(
    status_code: int,
    message: str,
    details: Optional[dict] = None
) -> JSONResponse:
    """
    Helper function to send consistent API responses

    Args:
        status_code: HTTP status code
        message: Response message
        details: Optional additional details

    Returns:
        JSONResponse with consistent format
    """
    return JSONResponse(
        status_code=status_code,
        content=StegoAPIResult(
            success=status_code < 400,
            message=message,
            details=details
        ).model_dump()
    )


def send_error(exc: Exception, operation: str) -> JSONResponse:
    """
    Map an exception raised while serving a request to an error response
    """
    if isinstance(exc, CapacityExceededError):
        logger.warning(f"{operation}: {exc}")
        return send_response(413, exc.message, exc.details)
    if isinstance(exc, (InvalidLengthError, DecryptionError)):
        logger.warning(f"{operation}: {exc}")
        return send_response(401, "Invalid password or corrupted payload", exc.details)
    if isinstance(exc, StegoError):
        logger.warning(f"{operation}: {exc}")
        return send_response(400, exc.message, exc.details)
    if isinstance(exc, ValueError):
        logger.warning(f"{operation}: {exc}")
        return send_response(400, str(exc))
    logger.error(f"Unexpected error in {operation}: {exc}\n{traceback.format_exc()}")
    return send_response(500, str(exc))


def png_response(png: bytes, result: HideResult) -> Response:
    return Response(
        content=png,
        media_type="image/png",
        headers={
            "Content-Disposition": 'attachment; filename="stego.png"',
            "X-Used-Capacity-Bits": str(result.used_capacity_bits),
            "X-Capacity-Bits": str(result.capacity_bits),
            "X-Cipher": result.cipher.value,
        },
    )


@router.post("/capacity", response_model=CapacityResult)
def check_capacity(file: UploadFile = File(...)):
    """
    Check how much content an image can carry

    Args:
        file: The image file to check

    Returns:
        CapacityResult with capacity information
    """
    try:
        cover = load_cover_image(file=BytesIO(file.file.read()))
        return stego_service.capacity(cover)
    except Exception as e:
        return send_error(e, "capacity")


@router.post("/hide-text")
def hide_text(
    file: UploadFile = File(...),
    text: str = Form(...),
    password: Optional[str] = Form(None),
):
    """
    Hide text in an image

    Args:
        file: Cover image
        text: Text to hide
        password: Password for encryption and pixel shuffling

    Returns:
        The stego image as PNG
    """
    try:
        logger.info(f"Received hide-text request: filename={file.filename}, text_len={len(text)}")
        cover = load_cover_image(file=BytesIO(file.file.read()))
        stego, result = stego_service.hide_text(cover, text, password)
        return png_response(encode_png(stego), result)
    except Exception as e:
        return send_error(e, "hide-text")


@router.post("/hide-files")
def hide_files(
    cover: UploadFile = File(...),
    secrets: List[UploadFile] = File(...),
    password: Optional[str] = Form(None),
):
    """
    Hide one or more files in an image

    Args:
        cover: Cover image
        secrets: Files to hide
        password: Password for encryption and pixel shuffling

    Returns:
        The stego image as PNG
    """
    try:
        logger.info(f"Received hide-files request: cover={cover.filename}, files={len(secrets)}")
        cover_image = load_cover_image(file=BytesIO(cover.file.read()))
        files = []
        for secret in secrets:
            files.append((secret.filename or "", secret.content_type or "", secret.file.read()))
        stego, result = stego_service.hide_files(cover_image, files, password)
        return png_response(encode_png(stego), result)
    except Exception as e:
        return send_error(e, "hide-files")


@router.post("/reveal", response_model=RevealAPIResult)
def reveal(
    file: UploadFile = File(...),
    password: Optional[str] = Form(None),
):
    """
    Reveal hidden text or files from a stego image

    Args:
        file: The stego image
        password: Password used when hiding

    Returns:
        RevealAPIResult with the text or the bundled files
    """
    try:
        logger.info(f"Received reveal request: filename={file.filename}")
        stego = load_cover_image(file=BytesIO(file.file.read()))
        result = stego_service.reveal(stego, password)
        if isinstance(result.content, FileBundle):
            files = [
                RevealedFile(name=f.name, type=f.type, data=f.data, size_bytes=len(f.content()))
                for f in result.content.files
            ]
            return RevealAPIResult(kind=result.kind.value, files=files, payload_bits=result.payload_bits)
        return RevealAPIResult(kind=result.kind.value, text=result.text, payload_bits=result.payload_bits)
    except Exception as e:
        return send_error(e, "reveal")
