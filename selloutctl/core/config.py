"""Configuration management for selloutctl.

Supports YAML profiles and environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from selloutctl.core.exceptions import ConfigurationError, ProfileNotFoundError
from selloutctl.core.timeouts import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_UPLOAD_TIMEOUT_SECONDS

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "selloutctl"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Environment variable names
ENV_URL = "SELLOUT_URL"
ENV_PROFILE = "SELLOUT_PROFILE"
ENV_VERIFY_SSL = "SELLOUT_VERIFY_SSL"
ENV_TIMEOUT = "SELLOUT_TIMEOUT"
ENV_UPLOAD_TIMEOUT = "SELLOUT_UPLOAD_TIMEOUT"
ENV_COD_CLIENTE = "SELLOUT_COD_CLIENTE"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid integer in {name}", field=name, value=raw)


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Configuration profile for a sellout backend."""

    url: str
    verify_ssl: bool = True
    timeout: int = DEFAULT_HTTP_TIMEOUT_SECONDS
    upload_timeout: int = DEFAULT_UPLOAD_TIMEOUT_SECONDS
    cod_cliente: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "url": self.url,
            "verify_ssl": self.verify_ssl,
            "timeout": self.timeout,
            "upload_timeout": self.upload_timeout,
        }
        if self.cod_cliente:
            data["cod_cliente"] = self.cod_cliente
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            url=data.get("url", ""),
            verify_ssl=data.get("verify_ssl", True),
            timeout=data.get("timeout", DEFAULT_HTTP_TIMEOUT_SECONDS),
            upload_timeout=data.get("upload_timeout", DEFAULT_UPLOAD_TIMEOUT_SECONDS),
            cod_cliente=data.get("cod_cliente"),
        )


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration."""

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        # Load from file if exists
        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

                config.default_profile = data.get("default_profile", "default")
                config.output_format = data.get("output_format", "table")

                for name, pdata in (data.get("profiles") or {}).items():
                    config.profiles[name] = Profile.from_dict(pdata or {})
            except (OSError, yaml.YAMLError, AttributeError) as e:
                raise ConfigurationError(f"Failed to load config: {e}")

        # Environment variable overrides
        if url := os.getenv(ENV_URL):
            verify_ssl = os.getenv(ENV_VERIFY_SSL, "true").lower() in ("true", "1", "yes")
            config.profiles["default"] = Profile(
                url=url,
                verify_ssl=verify_ssl,
                timeout=_env_int(ENV_TIMEOUT, DEFAULT_HTTP_TIMEOUT_SECONDS),
                upload_timeout=_env_int(ENV_UPLOAD_TIMEOUT, DEFAULT_UPLOAD_TIMEOUT_SECONDS),
                cod_cliente=os.getenv(ENV_COD_CLIENTE) or None,
            )
        elif cod_cliente := os.getenv(ENV_COD_CLIENTE):
            for profile in config.profiles.values():
                profile.cod_cliente = cod_cliente

        if profile_name := os.getenv(ENV_PROFILE):
            config.default_profile = profile_name

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file.

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: p.to_dict() for name, p in self.profiles.items()},
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Args:
            name: Profile name. If None, uses default_profile.

        Returns:
            Profile configuration.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        name = name or self.default_profile
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        return self.profiles[name]

    def has_profile(self, name: str) -> bool:
        """Check if profile exists."""
        return name in self.profiles

    def add_profile(
        self,
        name: str,
        url: str,
        verify_ssl: bool = True,
        timeout: int = DEFAULT_HTTP_TIMEOUT_SECONDS,
        upload_timeout: int = DEFAULT_UPLOAD_TIMEOUT_SECONDS,
        cod_cliente: Optional[str] = None,
    ) -> Profile:
        """Add or update a profile.

        Args:
            name: Profile name.
            url: Backend base URL (for example ``https://host/api-sellout/rm``).
            verify_ssl: Whether to verify SSL certificates.
            timeout: Request timeout in seconds.
            upload_timeout: Upload deadline in seconds.
            cod_cliente: Client code sent with every upload.

        Returns:
            Created profile.
        """
        profile = Profile(
            url=url,
            verify_ssl=verify_ssl,
            timeout=timeout,
            upload_timeout=upload_timeout,
            cod_cliente=cod_cliente,
        )
        self.profiles[name] = profile
        return profile

    def remove_profile(self, name: str) -> bool:
        """Remove a profile.

        Returns:
            True if removed, False if didn't exist.
        """
        if name in self.profiles:
            del self.profiles[name]
            return True
        return False

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name
