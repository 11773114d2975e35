from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any


class LiveStreamInfo(BaseModel):
    title: Optional[str] = None
    game_name: Optional[str] = None
    viewer_count: int = 0
    thumbnail_url: Optional[str] = None
    started_at: Optional[str] = None

    @classmethod
    def from_helix(cls, stream: Dict[str, Any]) -> "LiveStreamInfo":
        return cls(
            title=stream.get("title"),
            game_name=stream.get("game_name"),
            viewer_count=stream.get("viewer_count") or 0,
            thumbnail_url=stream.get("thumbnail_url"),
            started_at=stream.get("started_at"),
        )


class ChannelRecord(BaseModel):
    id: str
    login: str
    display_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_live: bool = False
    stream: Optional[LiveStreamInfo] = None

    @classmethod
    def from_helix(cls, user: Dict[str, Any], stream: Optional[Dict[str, Any]] = None) -> "ChannelRecord":
        """Join a Helix user with its (optional) live stream entry."""
        return cls(
            id=user["id"],
            login=user["login"],
            display_name=user.get("display_name"),
            profile_image_url=user.get("profile_image_url"),
            is_live=stream is not None,
            stream=LiveStreamInfo.from_helix(stream) if stream is not None else None,
        )


class ChannelsResponse(BaseModel):
    channels: List[ChannelRecord] = Field(default_factory=list)


class VideosResponse(BaseModel):
    # Helix video objects are passed through untouched
    videos: List[Dict[str, Any]] = Field(default_factory=list)


class PlaylistResponse(BaseModel):
    url: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    stack: Optional[str] = None


class StatusResponse(BaseModel):
    status: str
    version: str
    environment: str
    helix_configured: bool
    gql_enabled: bool = True
    endpoints: Dict[str, str] = Field(default_factory=dict)
