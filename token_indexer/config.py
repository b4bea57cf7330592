from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

_BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Upstream requests
    request_timeout_seconds: float = Field(
        default=8.0,
        gt=0,
        le=60,
        description="Timeout applied to every individual upstream HTTP call",
    )

    # Ethereum (Ethplorer)
    ethplorer_base_url: str = Field(
        default="https://api.ethplorer.io",
        description="Base URL for the Ethplorer address info API",
    )
    ethplorer_api_key: str = Field(
        default="freekey",
        description="Ethplorer API key (the public 'freekey' is rate limited)",
    )

    # Tron (Tronscan)
    tronscan_base_url: str = Field(
        default="https://apilist.tronscan.org",
        description="Base URL for the Tronscan account API",
    )

    # Solana public token-list providers
    solana_user_agent: str = Field(
        default=_BROWSER_USER_AGENT,
        description="User-Agent sent to the public Solana token-list providers",
    )
    solana_demo_fallback_enabled: bool = Field(
        default=True,
        description=(
            "Return synthetic demonstration balances when every Solana provider fails. "
            "When disabled, a single 'unavailable' entry is returned instead."
        ),
    )

    @property
    def has_ethplorer_key(self) -> bool:
        return bool(self.ethplorer_api_key)


# Global settings instance
settings = Settings()
