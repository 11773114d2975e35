from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

# Application version
VERSION = "0.1.0"

# Public web player Client-ID, documented default for the signing endpoint
DEFAULT_GQL_CLIENT_ID = "kimne78kx3ncx6brgo4mv6wki5h1ko"

# Upstream endpoint defaults
DEFAULT_OAUTH_TOKEN_URL = "https://id.twitch.tv/oauth2/token"
DEFAULT_HELIX_BASE_URL = "https://api.twitch.tv/helix"
DEFAULT_GQL_URL = "https://gql.twitch.tv/gql"
DEFAULT_USHER_BASE_URL = "https://usher.ttvnw.net"
DEFAULT_TOKEN_EXPIRY_MARGIN = 60
DEFAULT_VIDEOS_PAGE_SIZE = 20


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    Utilizes pydantic-settings for robust validation and type-casting.
    """

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "info"
    RELOAD: bool = False
    # "production" hides stack traces and unexpected error details
    APP_ENV: str = "development"
    ROOT_PATH: str = ""
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"
    OPENAPI_URL: str = "/openapi.json"

    # Twitch's public Client-ID for GraphQL (playback tokens only).
    # Registered Client-IDs are rejected by the signing endpoint.
    GQL_CLIENT_ID: str = DEFAULT_GQL_CLIENT_ID

    # Registered Twitch app credentials for the Helix API (metadata)
    TWITCH_CLIENT_ID: Optional[str] = None
    TWITCH_CLIENT_SECRET: Optional[str] = None

    # Upstream endpoints
    OAUTH_TOKEN_URL: str = DEFAULT_OAUTH_TOKEN_URL
    HELIX_BASE_URL: str = DEFAULT_HELIX_BASE_URL
    GQL_URL: str = DEFAULT_GQL_URL
    USHER_BASE_URL: str = DEFAULT_USHER_BASE_URL

    # Refresh the app token this many seconds before it actually expires
    TOKEN_EXPIRY_MARGIN: int = DEFAULT_TOKEN_EXPIRY_MARGIN
    VIDEOS_PAGE_SIZE: int = DEFAULT_VIDEOS_PAGE_SIZE
    # Helix accepts at most 100 logins per users/streams lookup
    MAX_LOGINS: int = 100

    # Model configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )

    @field_validator('TWITCH_CLIENT_ID', 'TWITCH_CLIENT_SECRET', mode='before')
    @classmethod
    def strip_credentials(cls, v):
        # Blank values count as unset
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator('GQL_CLIENT_ID', mode='before')
    @classmethod
    def strip_gql_client_id(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or DEFAULT_GQL_CLIENT_ID
        return v

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"


# Global settings instance
settings = Settings()
