"""
Tagged plaintext convention layered above the codec

    text::<message>
    bundle::{"files": [{"name": ..., "type": ..., "data": <base64>}]}
"""

from pydantic import ValidationError

from ..models.vault_models import ContentKind, FileBundle, PlainText, VaultContent
from .errors import ContentParseError


SEPARATOR = "::"
KNOWN_TAGS = {kind.value for kind in ContentKind}


def encode_content(content: VaultContent) -> str:
    if isinstance(content, PlainText):
        return f"{ContentKind.TEXT.value}{SEPARATOR}{content.text}"
    if isinstance(content, FileBundle):
        return f"{ContentKind.BUNDLE.value}{SEPARATOR}{content.model_dump_json(exclude={'kind'})}"
    raise TypeError(f"Unsupported content type: {type(content).__name__}")


def decode_content(plaintext: str) -> VaultContent:
    """
    Parse a decrypted plaintext into PlainText or FileBundle

    Args:
        plaintext: Decrypted string carrying a kind tag

    Returns:
        The parsed content

    Raises:
        ContentParseError: If the tag is unknown or the bundle is malformed
    """
    tag, separator, rest = plaintext.partition(SEPARATOR)
    # A bare tag carries empty content
    if not separator and tag not in KNOWN_TAGS:
        raise ContentParseError(
            "Could not identify hidden data type. The password may be incorrect or the image may not contain valid data."
        )

    if tag == ContentKind.TEXT.value:
        return PlainText(text=rest)
    if tag == ContentKind.BUNDLE.value:
        try:
            return FileBundle.model_validate_json(rest)
        except ValidationError as exc:
            raise ContentParseError("Failed to parse hidden file data. Data may be corrupted.") from exc

    raise ContentParseError(f"Unknown hidden data type: {tag!r}")
