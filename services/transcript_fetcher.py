"""
Caption fetcher using youtube-transcript-api, producing SRT caption documents.
"""
from typing import List, Optional

from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api.formatters import SRTFormatter
from youtube_transcript_api._errors import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
)

from models import TranscriptUnavailableError, UpstreamError
from app_logging import log_with_context
from config import config

NO_CAPTIONS_MESSAGE = "No captions available for this video"


class TranscriptFetcher:
    """Fetches a video's caption track and renders it as an SRT document."""

    def __init__(self, languages: Optional[List[str]] = None, api: Optional[YouTubeTranscriptApi] = None):
        """
        Initialize the transcript fetcher.

        Args:
            languages: Preferred caption languages, in order
            api: Transcript API client (a default client is created if omitted)
        """
        self.languages = languages or list(config.caption_languages)
        self.api = api or YouTubeTranscriptApi()
        self.formatter = SRTFormatter()

    def fetch_captions(self, video_id: str) -> str:
        """
        Fetch the captions of a video.

        Tries the preferred languages first and falls back to the first
        caption track the video has.

        Args:
            video_id: YouTube video ID

        Returns:
            Caption document in SRT block format

        Raises:
            TranscriptUnavailableError: The video has no usable captions
            UpstreamError: The provider could not be reached or refused the request
        """
        log_with_context("info", f"Fetching captions for video {video_id}")

        try:
            try:
                fetched = self.api.fetch(video_id, languages=self.languages)
            except NoTranscriptFound:
                fetched = self._fetch_first_available(video_id)
        except (TranscriptsDisabled, NoTranscriptFound, VideoUnavailable) as e:
            log_with_context("warning", f"No captions for video {video_id}: {type(e).__name__}")
            raise TranscriptUnavailableError(NO_CAPTIONS_MESSAGE) from e
        except CouldNotRetrieveTranscript as e:
            log_with_context("error", f"Caption provider refused request for {video_id}: {type(e).__name__}")
            raise UpstreamError("Caption provider request failed") from e
        except TranscriptUnavailableError:
            raise
        except Exception as e:
            log_with_context("error", f"Unexpected error fetching captions for {video_id}: {str(e)}")
            raise UpstreamError("Caption provider unavailable") from e

        document = self.formatter.format_transcript(fetched)
        if not document.strip():
            raise TranscriptUnavailableError(NO_CAPTIONS_MESSAGE)

        log_with_context("info", f"Fetched {len(document)} characters of captions for video {video_id}")
        return document

    def _fetch_first_available(self, video_id: str):
        """Fetch the first caption track listed for a video."""
        transcript_list = list(self.api.list(video_id))
        if not transcript_list:
            raise TranscriptUnavailableError(NO_CAPTIONS_MESSAGE)

        # Manual tracks before auto-generated ones
        transcript_list.sort(key=lambda t: t.is_generated)
        transcript = transcript_list[0]
        log_with_context("info", f"Using {transcript.language_code} captions for video {video_id}")
        return transcript.fetch()
