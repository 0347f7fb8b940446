"""Configuration management for the rent desk.

Provides organization-specific configuration with defaults taken from the
global settings and environment-based overrides.
"""

import os
import re
from dataclasses import dataclass
from typing import Any

from backend.core.config import settings

FREQUENCIES = ("years", "months", "weeks", "days")


@dataclass
class RentsConfig:
    """Configuration for one organization's rent desk.

    Supports organization-specific overrides via environment variables
    with pattern: RENTS_<ORGANIZATION>_<SETTING>
    """

    organization: str
    organization_id: str | None = None

    # API settings
    api_base_url: str = settings.RENT_API_BASE_URL
    api_timeout: float = settings.RENT_API_TIMEOUT_S
    api_token: str = settings.RENT_API_TOKEN
    documents_path: str = settings.RENT_API_DOCUMENTS_PATH

    # Presentation
    locale: str = settings.DEFAULT_LOCALE
    locales_dir: str = settings.LOCALES_DIR
    # Rent term frequency of the organization's leases
    frequency: str = "months"
    # strftime pattern for "sent on" tooltips; %-d, %-m, %-H and %-I are unpadded
    sent_date_format: str = "%A, %B %-d, %Y %-I:%M %p"

    @staticmethod
    def env_prefix(organization: str) -> str:
        slug = re.sub(r"[^A-Za-z0-9]+", "_", organization).strip("_").upper()
        return f"RENTS_{slug}"

    @classmethod
    def from_organization(cls, organization: str) -> "RentsConfig":
        """Create configuration for a specific organization.

        Args:
            organization: Organization name (as used in URLs)

        Returns:
            Configured instance with organization-specific overrides
        """
        config = cls(organization=organization)
        prefix = cls.env_prefix(organization)

        config.organization_id = os.getenv(f"{prefix}_ID", config.organization_id)
        config.api_base_url = os.getenv(f"{prefix}_API_URL", config.api_base_url)
        config.api_timeout = float(os.getenv(f"{prefix}_API_TIMEOUT", config.api_timeout))
        config.api_token = os.getenv(f"{prefix}_API_TOKEN", config.api_token)
        config.locale = os.getenv(f"{prefix}_LOCALE", config.locale)
        config.frequency = os.getenv(f"{prefix}_FREQUENCY", config.frequency)

        if config.frequency not in FREQUENCIES:
            raise ValueError(f"Invalid term frequency: {config.frequency}")

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary (token omitted)."""
        return {
            "organization": self.organization,
            "organization_id": self.organization_id,
            "api_base_url": self.api_base_url,
            "api_timeout": self.api_timeout,
            "documents_path": self.documents_path,
            "locale": self.locale,
            "frequency": self.frequency,
        }
