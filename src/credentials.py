from dataclasses import dataclass
from typing import Optional

from config import Settings, settings as default_settings
from errors import ConfigurationError


@dataclass(frozen=True)
class Credentials:
    """Static identifiers for the two upstream trust domains.

    ``gql_client_id`` is the public client id accepted by the playback
    signing endpoint. ``helix_client_id``/``helix_client_secret`` are the
    registered app credentials used for the metadata API.
    """
    gql_client_id: str
    helix_client_id: Optional[str] = None
    helix_client_secret: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Credentials":
        settings = settings or default_settings
        return cls(
            gql_client_id=settings.GQL_CLIENT_ID,
            helix_client_id=settings.TWITCH_CLIENT_ID,
            helix_client_secret=settings.TWITCH_CLIENT_SECRET,
        )

    @property
    def helix_configured(self) -> bool:
        return bool(self.helix_client_id and self.helix_client_secret)

    def require_helix(self) -> None:
        if not self.helix_configured:
            raise ConfigurationError(
                "TWITCH_CLIENT_ID and TWITCH_CLIENT_SECRET required for Helix API")
