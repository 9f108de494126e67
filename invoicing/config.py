# invoicing/config.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# .env ao lado do pacote ou na raiz do projeto
load_dotenv(dotenv_path=Path(__file__).parent / ".env")
load_dotenv()

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{_PROJECT_ROOT / 'invoicing.db'}")
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "5000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]

# ids são uuid4 em hex (32 caracteres)
ID_PATTERN = r"^[0-9a-f]{32}$"
