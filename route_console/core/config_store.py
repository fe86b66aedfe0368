"""
Admin API Configuration Store
Holds the single base URL / API key pair the console talks to
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Fixed key the configuration record is stored under
CONFIG_KEY = "apiConfig"


class ApiConfig(BaseModel):
    """Admin API endpoint and credential"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    base_url: str = Field(..., alias="baseUrl", description="Admin API base URL, e.g. http://127.0.0.1:9180/apisix/admin")
    api_key: str = Field(..., alias="apiKey", description="Value sent as X-API-KEY")

    @field_validator("base_url", "api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    def masked(self) -> dict:
        """Representation safe to show back to the operator"""
        key = self.api_key
        hint = key[-4:] if len(key) > 8 else ""
        return {"base_url": self.base_url, "api_key": f"****{hint}"}


class ConfigStore:
    """
    Single-record configuration store

    The record is read once when the store is built and kept in memory.
    ``save`` writes the whole record to a temporary file and renames it over
    the target before swapping the in-memory value, so readers never observe
    a partial update. A store without a path keeps the value in memory only.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path).expanduser() if path else None
        self._config: Optional[ApiConfig] = self._read()

    def load(self) -> Optional[ApiConfig]:
        """Return the current configuration, or None when none was saved"""
        return self._config

    def save(self, config: ApiConfig) -> None:
        """Persist the configuration and replace the in-memory value"""
        if self.path is not None:
            self._write(config)
        self._config = config
        logger.info(f"Saved Admin API configuration for {config.base_url}")

    @property
    def is_configured(self) -> bool:
        return self._config is not None

    def _read(self) -> Optional[ApiConfig]:
        if self.path is None or not self.path.exists():
            return None

        try:
            record = json.loads(self.path.read_text(encoding="utf-8"))
            stored = record.get(CONFIG_KEY) if isinstance(record, dict) else None
            if stored is None:
                return None
            return ApiConfig.model_validate(stored)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable configuration at {self.path}: {e}")
            return None

    def _write(self, config: ApiConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        record = {CONFIG_KEY: config.model_dump(by_alias=True)}

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".config-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(record, fh, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
