# COMPONENT: RUNTIME CONFIGURATION
# REQUIREMENTS SATISFIED: environment-driven storage, external service and CORS settings
"""
src/cinetech/config.py

Collects every environment-controlled knob of the catalog backend into a
single immutable Settings object.

Values are read from the process environment (optionally primed from a
.env file by the application entry point). Numeric and boolean values
that fail to parse fall back to their defaults instead of raising, so a
typo in deployment configuration never prevents the service from
starting.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_OMDB_URL = "https://www.omdbapi.com/"
# Public demonstration key
DEFAULT_OMDB_API_KEY = "thewdb"


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "y", "on")


def _as_float(value: Optional[str], default: float) -> float:
    try:
        if value is None:
            return default
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    local_storage: bool = False
    local_storage_dir: str = "/tmp/cinetech-data"
    s3_bucket: Optional[str] = None
    s3_prefix: str = "cinetech/"
    aws_region: Optional[str] = None

    omdb_api_key: str = DEFAULT_OMDB_API_KEY
    omdb_url: str = DEFAULT_OMDB_URL
    omdb_timeout: float = 10.0

    seed_sample_data: bool = True
    frontend_origin: str = "http://localhost:8080"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build Settings from os.environ (or a provided mapping)."""
        src = os.environ if env is None else env
        return cls(
            local_storage=_as_bool(src.get("LOCAL_STORAGE"), False),
            local_storage_dir=src.get("LOCAL_STORAGE_DIR") or cls.local_storage_dir,
            s3_bucket=src.get("S3_BUCKET") or None,
            s3_prefix=src.get("S3_PREFIX", cls.s3_prefix),
            aws_region=src.get("AWS_REGION") or None,
            omdb_api_key=src.get("OMDB_API_KEY") or DEFAULT_OMDB_API_KEY,
            omdb_url=src.get("OMDB_URL") or DEFAULT_OMDB_URL,
            omdb_timeout=_as_float(src.get("OMDB_TIMEOUT"), cls.omdb_timeout),
            seed_sample_data=_as_bool(src.get("SEED_SAMPLE_DATA"), True),
            frontend_origin=src.get("FRONTEND_ORIGIN") or cls.frontend_origin,
        )
