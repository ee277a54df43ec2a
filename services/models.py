from dataclasses import dataclass, field
from enum import Enum


class MediaKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    PHOTOS = "photos"


@dataclass
class ResolvedContent:
    has_video: bool = False
    has_audio: bool = False
    has_photos: bool = False
    cover: str = ""
    author: str = "Unknown"
    likes: int = 0
    views: int = 0
    comments: int = 0

    @property
    def kinds(self) -> list[MediaKind]:
        """Available kinds, in menu order."""
        flags = [
            (self.has_audio, MediaKind.AUDIO),
            (self.has_video, MediaKind.VIDEO),
            (self.has_photos, MediaKind.PHOTOS),
        ]
        return [kind for present, kind in flags if present]

    @classmethod
    def from_api(cls, data: dict) -> "ResolvedContent":
        author = data.get("author")
        if not isinstance(author, dict):
            author = {}
        return cls(
            has_video=bool(data.get("has_video")),
            has_audio=bool(data.get("has_audio")),
            has_photos=bool(data.get("has_photos")),
            cover=data.get("cover") or "",
            author=author.get("nickname") or "Unknown",
            likes=data.get("digg_count") or 0,
            views=data.get("play_count") or 0,
            comments=data.get("comment_count") or 0,
        )


@dataclass
class DeliveredAsset:
    kind: MediaKind
    url: str | None = None
    photos: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        if self.kind is MediaKind.PHOTOS:
            return not self.photos
        return not self.url

    @classmethod
    def from_api(cls, kind: MediaKind, payload: dict) -> "DeliveredAsset":
        photos = [
            p["url"] for p in payload.get("photos") or []
            if isinstance(p, dict) and p.get("url")
        ]
        return cls(kind=kind, url=payload.get("url") or None, photos=photos)


@dataclass
class Failure:
    reason: str = "Unknown error"
