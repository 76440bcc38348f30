# Pixel Vault Test Configuration
# Shared fixtures for unit and integration tests

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from src.services.pixel_vault.models.vault_models import CoverImage


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep tests independent of any PIXEL_VAULT_* variables on the host."""
    for name in ("PIXEL_VAULT_CIPHER", "PIXEL_VAULT_MAX_COVER_PIXELS", "PIXEL_VAULT_HTTP_TIMEOUT", "PIXEL_VAULT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def password():
    return "correct horse battery staple"


@pytest.fixture
def noise_pixels():
    """Random RGBA pixels, 64 wide and 48 high, with varied alpha."""
    rng = np.random.default_rng(2024)
    return rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8)


@pytest.fixture
def cover_image(noise_pixels):
    return CoverImage(noise_pixels.copy())


@pytest.fixture
def small_cover():
    """10x10 cover, capacity 300 bits."""
    return CoverImage.blank(10, 10, fill=(120, 130, 140, 255))


@pytest.fixture
def cover_png(noise_pixels):
    buffer = BytesIO()
    Image.fromarray(noise_pixels).save(buffer, format="PNG")
    return buffer.getvalue()
