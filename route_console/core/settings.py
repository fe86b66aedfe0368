"""
Console Settings
Process-level settings read from the environment, plus logging setup
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "http://127.0.0.1:9180/apisix/admin"


class ConsoleSettings(BaseModel):
    """Configuration for the console service"""
    config_path: str = Field(default="~/.apisix-console/config.json", description="Where the Admin API config is persisted")
    default_base_url: str = Field(default=DEFAULT_BASE_URL, description="Suggested base URL before one is saved")
    page_size: int = Field(default=10, gt=0)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default="logs/route_console.log", description="Empty disables file logging")

    @classmethod
    def from_env(cls) -> "ConsoleSettings":
        return cls(
            config_path=os.getenv("CONSOLE_CONFIG_PATH", "~/.apisix-console/config.json"),
            default_base_url=os.getenv("CONSOLE_DEFAULT_BASE_URL", DEFAULT_BASE_URL),
            page_size=int(os.getenv("CONSOLE_PAGE_SIZE", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE", "logs/route_console.log") or None,
        )


def configure_logging(settings: ConsoleSettings) -> None:
    """Configure root logging for the console process"""
    handlers = [logging.StreamHandler(sys.stdout)]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, mode="a"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )
    logging.getLogger("route_console").info(f"Logging configured with level: {settings.log_level}")
