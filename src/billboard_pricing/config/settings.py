"""
Centralized settings and path configuration for the billboard pricing engine.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Backend price store (CSV file in the bulk exchange format)
    price_store_path: Path

    # Optional JSON file backing the cache; in-memory when None
    cache_path: Optional[Path] = None

    cache_ttl_seconds: int = 5 * 60
    quote_validity_days: int = 30
    currency: str = "د.ل"
    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        store_path = os.getenv('BILLBOARD_PRICING_STORE')
        cache_path = os.getenv('BILLBOARD_PRICING_CACHE')
        ttl = os.getenv('BILLBOARD_PRICING_CACHE_TTL')

        return cls(
            project_root=root,
            price_store_path=Path(store_path) if store_path else root / 'data' / 'pricing.csv',
            cache_path=Path(cache_path) if cache_path else None,
            cache_ttl_seconds=int(ttl) if ttl else 5 * 60,
            log_level=os.getenv('BILLBOARD_PRICING_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
