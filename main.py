from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.services.pixel_vault import __version__
from src.services.pixel_vault.main import router as vault_router
from src.utility.constants_manager import ConstantsManager

# Configure logging
logging.basicConfig(level=ConstantsManager().get_log_level())
logger = logging.getLogger(__name__)


app = FastAPI(title="Pixel Vault", version=__version__)

app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(vault_router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}
