# storefront/config.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# This file holds runtime configuration for the catalog service.

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


@dataclass
class Settings:
    api_prefix: str = field(default_factory=lambda: _env("STORE_API_PREFIX", "/make-server-6c34fe24"))

    # Catalog store: "memory" or "file"
    store_backend: str = field(default_factory=lambda: _env("STORE_BACKEND", "file"))
    store_path: Path = field(default_factory=lambda: Path(_env("STORE_PATH", str(BASE_DIR / "data" / "kv_store.json"))))

    # Blob sink: "local" or "supabase"
    blob_backend: str = field(default_factory=lambda: _env("BLOB_BACKEND", "local"))
    blob_dir: Path = field(default_factory=lambda: Path(_env("BLOB_DIR", str(BASE_DIR / "data" / "images"))))
    blob_public_url: str = field(default_factory=lambda: _env("BLOB_PUBLIC_URL", "http://127.0.0.1:8085/images"))

    supabase_url: str = field(default_factory=lambda: _env("SUPABASE_URL", ""))
    supabase_service_role_key: str = field(default_factory=lambda: _env("SUPABASE_SERVICE_ROLE_KEY", ""))
    supabase_bucket: str = field(default_factory=lambda: _env("SUPABASE_BUCKET", "product-images"))

    # Identity provider: "memory" or "supabase"
    identity_backend: str = field(default_factory=lambda: _env("IDENTITY_BACKEND", "memory"))

    cors_origins: List[str] = field(default_factory=lambda: _env("CORS_ORIGINS", "*").split(","))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
