"""Resolve a video page URL into a direct media URL and a safe filename."""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

import yt_dlp

import config
from errors import ExtractionFailed, InvalidInput, NoDownloadableFormat

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "video"
NO_CODEC = "none"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_\s]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class EncodingRecord:
    """One rendition of a video as reported by yt-dlp."""
    container: Optional[str] = None
    video_codec: Optional[str] = None
    audio_codec: Optional[str] = None
    height: Optional[int] = None
    media_url: Optional[str] = None

    @classmethod
    def from_info(cls, fmt: dict) -> "EncodingRecord":
        return cls(
            container=fmt.get("ext"),
            video_codec=fmt.get("vcodec"),
            audio_codec=fmt.get("acodec"),
            height=fmt.get("height"),
            media_url=fmt.get("url"),
        )

    @property
    def is_combined_mp4(self) -> bool:
        return (
            self.video_codec != NO_CODEC
            and self.audio_codec != NO_CODEC
            and self.container == "mp4"
        )


@dataclass(frozen=True)
class VideoMetadata:
    title: Optional[str] = None
    formats: List[EncodingRecord] = field(default_factory=list)

    @classmethod
    def from_info(cls, info: dict) -> "VideoMetadata":
        return cls(
            title=info.get("title"),
            formats=[EncodingRecord.from_info(f) for f in (info.get("formats") or [])],
        )


@dataclass(frozen=True)
class ResolvedDownload:
    direct_url: str
    title: str


def _ydl_opts():
    return {
        "quiet": True,
        "no_warnings": True,
        "skip_download": True,
        "nocheckcertificate": config.YTDLP_NO_CHECK_CERTIFICATE,
    }


def extract(page_url: str) -> VideoMetadata:
    """Fetch the metadata document for a page URL without downloading anything."""
    logger.info("Running yt-dlp to fetch metadata...")
    try:
        with yt_dlp.YoutubeDL(_ydl_opts()) as ydl:
            info = ydl.extract_info(page_url, download=False)
    except Exception as e:
        raise ExtractionFailed(details=str(e)) from e

    if not isinstance(info, dict):
        raise ExtractionFailed(details="yt-dlp returned no metadata")

    logger.info("Metadata fetched successfully.")
    return VideoMetadata.from_info(info)


def _height(record: EncodingRecord) -> int:
    return record.height or 0


def select_format(formats: List[EncodingRecord]) -> EncodingRecord:
    """Pick the tallest combined audio+video mp4, else the first record with a URL.

    Ties on height keep the earliest record.
    """
    candidates = [f for f in formats if f.is_combined_mp4]

    if candidates:
        logger.info(
            "Found MP4 formats: %s",
            ", ".join(f"{f.height or '?'}p" for f in candidates),
        )
        best = candidates[0]
        for current in candidates[1:]:
            if _height(current) > _height(best):
                best = current
    else:
        logger.warning(
            "No MP4 formats found with both audio & video. "
            "Falling back to any format with URL."
        )
        best = next((f for f in formats if f.media_url), None)

    if best is None or not best.media_url:
        raise NoDownloadableFormat()
    return best


def sanitize_title(title: Optional[str]) -> str:
    """Reduce a title to ASCII letters, digits and underscores.

    Whitespace runs become a single underscore. Empty input, or input with
    nothing left after stripping, yields "video".
    """
    cleaned = _UNSAFE_CHARS.sub("", title or DEFAULT_TITLE)
    cleaned = _WHITESPACE.sub("_", cleaned)
    return cleaned or DEFAULT_TITLE


def choose(metadata: VideoMetadata) -> ResolvedDownload:
    logger.info("Available formats count: %d", len(metadata.formats))
    best = select_format(metadata.formats)
    title = sanitize_title(metadata.title)

    logger.info("Best format chosen: %sp, ext: %s", best.height or "?", best.container)
    logger.info("Video title: %s", title)
    return ResolvedDownload(direct_url=best.media_url, title=title)


def resolve(page_url, extractor=None) -> ResolvedDownload:
    """Resolve a page URL to the best direct media URL and a sanitized title."""
    if not isinstance(page_url, str) or not page_url.strip():
        raise InvalidInput("Video URL is required.")

    logger.info("Received URL for info: %s", page_url)
    return choose((extractor or extract)(page_url))
