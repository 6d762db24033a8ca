"""
Orchestrator coordinating the keyword search workflow.

A search runs through fixed stages: authenticate, reserve quota, validate input,
load captions (cache first, then the caption provider), match the keyword and
finally commit the quota. Every stage either advances or raises a SearchError;
the reserved quota slot is charged only when all stages succeeded.
"""
import asyncio
from datetime import date
from typing import Callable, Optional, Tuple

from models import (
    BadRequestError, QuotaExceededError, SearchError, SearchResult,
    StorageError, UnauthorizedError, UpstreamError,
)
from app_logging import log_with_context
from .authenticator import Authenticator
from .cache import TranscriptCacheStore
from .caption_parser import find_keyword, parse_blocks
from .transcript_fetcher import TranscriptFetcher
from .usage_ledger import UsageLedgerStore
from .utils import TimingContext, extract_video_id, utc_today


class KeywordSearchOrchestrator:
    """Runs a single keyword search request through its stages."""

    def __init__(
        self,
        authenticator: Authenticator,
        ledger: UsageLedgerStore,
        cache: TranscriptCacheStore,
        fetcher: TranscriptFetcher,
        daily_limit: int = 3,
        cache_ttl_seconds: float = 24 * 60 * 60,
        upstream_timeout_seconds: float = 30.0,
        today: Callable[[], date] = utc_today,
    ):
        self.authenticator = authenticator
        self.ledger = ledger
        self.cache = cache
        self.fetcher = fetcher
        self.daily_limit = daily_limit
        self.cache_ttl_seconds = cache_ttl_seconds
        self.upstream_timeout_seconds = upstream_timeout_seconds
        self.today = today

    async def search(self, credential: Optional[str], video_url: Optional[str], keyword: Optional[str]) -> SearchResult:
        """
        Find the caption timestamps of a video where the keyword appears.

        Args:
            credential: Bearer token of the caller
            video_url: YouTube video URL
            keyword: Keyword to look for

        Returns:
            SearchResult with hits in document order

        Raises:
            SearchError: Subclass describing the stage that failed
        """
        user_id = await self._authenticate(credential)
        today = self.today()
        self._reserve_quota(user_id, today)

        committed = False
        try:
            video_id, keyword = self._validate_input(video_url, keyword)
            captions, cache_hit = await self._load_captions(video_id)
            hits = find_keyword(parse_blocks(captions), keyword)
            self.ledger.commit(user_id, today)
            committed = True
        finally:
            if not committed:
                self._release_quota(user_id, today)

        log_with_context("info", f"Search for user {user_id} on video {video_id}: {len(hits)} hits (cache_hit={cache_hit})")
        return SearchResult(user_id=user_id, video_id=video_id, hits=hits, cache_hit=cache_hit)

    async def _authenticate(self, credential: Optional[str]) -> str:
        try:
            return await self.authenticator.authenticate(credential)
        except SearchError:
            raise
        except Exception as e:
            log_with_context("warning", f"Authentication failed: {str(e)}")
            raise UnauthorizedError("Unauthorized") from e

    def _reserve_quota(self, user_id: str, today: date) -> None:
        decision = self.ledger.check_and_reserve(user_id, today, self.daily_limit)
        if not decision.allowed:
            raise QuotaExceededError(self.daily_limit)

    def _release_quota(self, user_id: str, today: date) -> None:
        try:
            self.ledger.release(user_id, today)
        except StorageError:
            log_with_context("error", f"Failed to release quota reservation for user {user_id}", exc_info=True)

    def _validate_input(self, video_url: Optional[str], keyword: Optional[str]) -> Tuple[str, str]:
        video_id = extract_video_id(video_url)
        if not video_id or not keyword or not keyword.strip():
            raise BadRequestError("Invalid video URL or keyword")
        return video_id, keyword

    async def _load_captions(self, video_id: str) -> Tuple[str, bool]:
        """Return the captions of a video and whether they came from the cache."""
        entry = self.cache.get(video_id)
        if entry is not None:
            return entry.captions, True

        with TimingContext(f"Caption fetch for {video_id}"):
            try:
                captions = await asyncio.wait_for(
                    asyncio.to_thread(self.fetcher.fetch_captions, video_id),
                    timeout=self.upstream_timeout_seconds,
                )
            except asyncio.TimeoutError as e:
                log_with_context("error", f"Caption fetch for {video_id} timed out after {self.upstream_timeout_seconds}s")
                raise UpstreamError("Caption provider timed out") from e

        self.cache.put(video_id, captions, self.cache_ttl_seconds)
        return captions, False
