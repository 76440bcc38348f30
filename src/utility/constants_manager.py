from dotenv import load_dotenv, find_dotenv
import os
from typing import Optional

DEFAULT_MAX_COVER_PIXELS = 16_000_000


class ConstantsManager:
    _dotenv_loaded = False

    def __init__(self):
        if not ConstantsManager._dotenv_loaded:
            load_dotenv(dotenv_path=find_dotenv(usecwd=True), override=False)
            ConstantsManager._dotenv_loaded = True

    def get_optional_variable(self, variableName, default: Optional[str] = None) -> Optional[str]:
        variable = os.environ.get(variableName, "").strip()
        return variable or default

    def get_cipher_scheme(self) -> str:
        return self.get_optional_variable('PIXEL_VAULT_CIPHER', 'aes-gcm').lower()

    def get_max_cover_pixels(self) -> Optional[int]:
        value = self.get_optional_variable('PIXEL_VAULT_MAX_COVER_PIXELS', str(DEFAULT_MAX_COVER_PIXELS))
        try:
            limit = int(value)
        except ValueError:
            raise ValueError(f"PIXEL_VAULT_MAX_COVER_PIXELS must be an integer, got {value!r}")
        # 0 disables the limit
        return limit or None

    def get_http_timeout(self) -> float:
        value = self.get_optional_variable('PIXEL_VAULT_HTTP_TIMEOUT', '30')
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"PIXEL_VAULT_HTTP_TIMEOUT must be a number, got {value!r}")

    def get_log_level(self) -> str:
        return self.get_optional_variable('PIXEL_VAULT_LOG_LEVEL', 'INFO').upper()
