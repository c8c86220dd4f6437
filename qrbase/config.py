#!/usr/bin/env python3
"""
Configuration for the qrbase CLI and REST API

Config File Layout (YAML):
    codec:
      alphabet: 43            # 43 or 44
      text_encoding: utf-8    # used by --encode-text / --as-text
    api:
      enabled: false
      host: 0.0.0.0
      port: 8080
    logging:
      level: INFO
      file: ""                # empty = stderr only
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, List

import yaml


# =============================================================================
# Constants
# =============================================================================

DEFAULT_CONFIG_PATH = "config.yaml"

SUPPORTED_ALPHABETS = (43, 44)

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8080

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ApiConfig:
    """API server configuration."""
    enabled: bool = False
    host: str = DEFAULT_API_HOST
    port: int = DEFAULT_API_PORT


@dataclass
class CodecConfig:
    """Configuration for the CLI and API front ends."""
    # Codec settings
    alphabet: int = 43
    text_encoding: str = "utf-8"

    # API settings
    api: ApiConfig = field(default_factory=ApiConfig)

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    def __post_init__(self):
        self.alphabet = int(self.alphabet)
        if self.alphabet not in SUPPORTED_ALPHABETS:
            raise ValueError(f"Alphabet must be 43 or 44, got {self.alphabet}")

    @classmethod
    def from_yaml(cls, path: str) -> "CodecConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        codec = data.get("codec") or {}
        api_data = data.get("api") or {}
        log_data = data.get("logging") or {}

        return cls(
            alphabet=codec.get("alphabet", 43),
            text_encoding=codec.get("text_encoding", "utf-8"),
            api=ApiConfig(
                enabled=api_data.get("enabled", False),
                host=api_data.get("host", DEFAULT_API_HOST),
                port=api_data.get("port", DEFAULT_API_PORT),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file") or "",
        )

    def to_dict(self) -> Dict:
        """Convert config to dictionary."""
        return {
            "codec": {
                "alphabet": self.alphabet,
                "text_encoding": self.text_encoding,
            },
            "api": {
                "enabled": self.api.enabled,
                "host": self.api.host,
                "port": self.api.port,
            },
            "logging": {
                "level": self.log_level,
                "file": self.log_file,
            },
        }


# =============================================================================
# Logging
# =============================================================================

def setup_logging(level: str = "INFO", log_file: str = "") -> None:
    """
    Configure root logging from config values.

    Logs go to stderr so CLI output on stdout stays clean for piping.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
