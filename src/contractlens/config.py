"""
Runtime configuration for ContractLens.

Settings are read from the environment (and an optional ``.env`` file) once,
at process start, and passed explicitly to the analyzers that need them.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables once at module level
load_dotenv()

DEFAULT_SLITHER_TIMEOUT = 30  # seconds
DEFAULT_SOLHINT_TIMEOUT = 15  # seconds
DEFAULT_SUMMARY_EXCERPT_CHARS = 2000
DEFAULT_EXPLORER_URL = 'https://api-testnet.snowtrace.io/api'


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


@dataclass(frozen=True)
class Settings:
    """Configuration for the analysis engine and its collaborators."""

    slither_bin: str = 'slither'
    solhint_bin: str = 'solhint'
    slither_timeout: int = DEFAULT_SLITHER_TIMEOUT
    solhint_timeout: int = DEFAULT_SOLHINT_TIMEOUT
    solc_version: Optional[str] = None
    temp_dir: Optional[str] = None

    openai_api_key: Optional[str] = None
    openai_model: str = 'gpt-3.5-turbo'
    summary_excerpt_chars: int = DEFAULT_SUMMARY_EXCERPT_CHARS

    explorer_url: str = DEFAULT_EXPLORER_URL
    explorer_api_key: Optional[str] = None
    explorer_timeout: int = 30

    log_level: str = 'INFO'
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables, falling back to defaults."""
        return cls(
            slither_bin=_env_str('SLITHER_BIN', 'slither'),
            solhint_bin=_env_str('SOLHINT_BIN', 'solhint'),
            slither_timeout=_env_int('SLITHER_TIMEOUT', DEFAULT_SLITHER_TIMEOUT),
            solhint_timeout=_env_int('SOLHINT_TIMEOUT', DEFAULT_SOLHINT_TIMEOUT),
            solc_version=_env_str('SOLC_VERSION'),
            temp_dir=_env_str('TEMP_CONTRACTS_DIR'),
            openai_api_key=_env_str('OPENAI_API_KEY'),
            openai_model=_env_str('OPENAI_MODEL', 'gpt-3.5-turbo'),
            summary_excerpt_chars=_env_int('SUMMARY_EXCERPT_CHARS', DEFAULT_SUMMARY_EXCERPT_CHARS),
            explorer_url=_env_str('SNOWTRACE_API_URL', DEFAULT_EXPLORER_URL),
            explorer_api_key=_env_str('SNOWTRACE_API_KEY'),
            explorer_timeout=_env_int('EXPLORER_TIMEOUT', 30),
            log_level=_env_str('LOG_LEVEL', 'INFO').upper(),
            log_file=_env_str('LOG_FILE'),
        )

