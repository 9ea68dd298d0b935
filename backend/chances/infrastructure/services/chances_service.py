"""
Chances Service

Loads institutional statistics and the similar-applicant cohort, runs the
chances engine and assembles the tiered response.

Data flow:
1. Schools (hours-scale cache) and peer cohort (minutes-scale cache keyed by
   the coarsened query) are fetched concurrently under a deadline
2. The requester's own submissions are subtracted from the shared cohort
3. The engine classifies every school
"""

import asyncio
import logging
import time
from contextlib import AbstractAsyncContextManager
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from chances.config.settings import Settings, settings as app_settings
from chances.domain.cohort import PeerCohortQuery, subtract_own_submissions
from chances.domain.scoring import (
    ChancesEngine,
    ChancesResponse,
    ClassifierConstants,
    SchoolData,
    SimilarProfileStats,
    StudentProfile,
)
from chances.infrastructure.db.database import get_session_context
from chances.infrastructure.db.repositories import (
    SchoolRepository,
    SubmissionRepository,
)
from chances.infrastructure.exceptions import UpstreamTimeoutError
from chances.infrastructure.services.ttl_cache import TTLCache


logger = logging.getLogger(__name__)

SCHOOLS_CACHE_KEY = "chances-schools"

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def constants_from_settings(config: Settings) -> ClassifierConstants:
    """Engine constants with the configured overrides applied."""
    return ClassifierConstants(
        adjustment_scale=config.chances_adjustment_scale,
        min_confident_sample=config.chances_min_confident_sample,
        global_prior=config.chances_global_prior,
        probability_floor=config.chances_probability_floor,
        probability_ceiling=config.chances_probability_ceiling,
        reach_threshold=config.chances_reach_threshold,
        safety_threshold=config.chances_safety_threshold,
        far_reach_acceptance_rate=config.chances_far_reach_acceptance_rate,
        far_reach_probability=config.chances_far_reach_probability,
        min_display_confidence=config.chances_min_display_confidence,
        sat_fallback_width=config.chances_sat_fallback_width,
        act_fallback_width=config.chances_act_fallback_width,
    )


class ChancesService:
    """
    Orchestrates data loading around the pure chances engine.

    Each fetch opens its own session so the two loads can run concurrently.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        session_scope: SessionScope = get_session_context,
        engine: Optional[ChancesEngine] = None,
        school_cache: Optional[TTLCache[List[SchoolData]]] = None,
        cohort_cache: Optional[TTLCache[List[SimilarProfileStats]]] = None,
    ):
        self._config = config or app_settings
        self._session_scope = session_scope
        self._engine = engine or ChancesEngine(constants_from_settings(self._config))
        self._school_cache = school_cache or TTLCache(
            ttl_seconds=self._config.institutional_cache_ttl_seconds,
            max_entries=1,
            name="schools",
        )
        self._cohort_cache = cohort_cache or TTLCache(
            ttl_seconds=self._config.peer_cohort_cache_ttl_seconds,
            max_entries=self._config.peer_cohort_cache_max_entries,
            name="peer-cohort",
        )

    @property
    def engine(self) -> ChancesEngine:
        return self._engine

    def _submission_repository(self, session: AsyncSession) -> SubmissionRepository:
        return SubmissionRepository(
            session,
            gpa_tolerance=self._config.peer_gpa_tolerance,
            sat_tolerance=self._config.peer_sat_tolerance,
            act_tolerance=self._config.peer_act_tolerance,
            pending_review_delay_hours=self._config.pending_review_delay_hours,
        )

    async def fetch_institutional_stats(self) -> List[SchoolData]:
        """All schools with their published statistics."""

        async def load() -> List[SchoolData]:
            async with self._session_scope() as session:
                schools = await SchoolRepository(session).get_all_for_chances()
            logger.info(f"[CHANCES] Loaded {len(schools)} schools")
            return schools

        return await self._school_cache.get_or_load(SCHOOLS_CACHE_KEY, load)

    async def fetch_peer_cohort_stats(
        self,
        query: PeerCohortQuery,
        user_id: Optional[str] = None,
    ) -> List[SimilarProfileStats]:
        """
        Similar-applicant outcomes per school, excluding the requester.

        The shared aggregate is computed for the coarsened query and cached
        under its key; the requester's rows are removed afterwards.
        Windows are centred on the coarsened values, so requesters sharing
        a cache key see identical peer rows.
        """
        coarse = query.coarsen()

        async def load() -> List[SimilarProfileStats]:
            async with self._session_scope() as session:
                return await self._submission_repository(
                    session
                ).get_similar_profile_stats(coarse)

        cohort = await self._cohort_cache.get_or_load(coarse.cache_key(), load)

        requester = self._parse_user_id(user_id)
        if requester is None or not cohort:
            return list(cohort)

        async with self._session_scope() as session:
            own = await self._submission_repository(
                session
            ).get_similar_profile_stats(coarse, user_id=requester)

        if own:
            logger.debug(
                f"[PEER-STATS] Excluding requester submissions at {len(own)} schools"
            )
        return subtract_own_submissions(cohort, own)

    @staticmethod
    def _parse_user_id(user_id: Optional[str]) -> Optional[UUID]:
        if not user_id:
            return None
        try:
            return UUID(str(user_id))
        except ValueError:
            logger.warning(
                f"[PEER-STATS] Requester id {user_id!r} is not a UUID; "
                "own submissions not excluded"
            )
            return None

    async def calculate(
        self,
        profile: StudentProfile,
        admission_cycle: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> ChancesResponse:
        """
        Estimate the student's chances at every school.

        Args:
            profile: Validated student profile
            admission_cycle: Restrict peers to one cycle (YYYY-YYYY)
            user_id: Requester, whose own submissions are not counted as peers

        Raises:
            UpstreamTimeoutError: If the data loads exceed the deadline
            DatabaseError: If a data load fails
        """
        started = time.perf_counter()
        query = PeerCohortQuery.from_profile(profile, admission_cycle=admission_cycle)
        timeout = self._config.chances_fetch_timeout_seconds

        try:
            schools, peer_stats = await asyncio.wait_for(
                asyncio.gather(
                    self.fetch_institutional_stats(),
                    self.fetch_peer_cohort_stats(query, user_id=user_id),
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"[CHANCES] Data loads exceeded {timeout}s")
            raise UpstreamTimeoutError(
                timeout_seconds=timeout, original_error=e
            ) from e

        response = self._engine.build_response(
            profile,
            schools,
            peer_stats,
            max_results_per_tier=self._config.chances_max_results_per_tier,
        )

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"[CHANCES] Classified {response.total_schools} schools "
            f"({response.total_schools_evaluated} scored, "
            f"{len(peer_stats)} with peers) in {elapsed_ms:.0f}ms"
        )
        return response

    def clear_caches(self) -> None:
        self._school_cache.clear()
        self._cohort_cache.clear()


# Global instance (lazy initialization)
_chances_service: Optional[ChancesService] = None


def get_chances_service() -> ChancesService:
    """Get or create the process-wide service (shares its caches)."""
    global _chances_service
    if _chances_service is None:
        _chances_service = ChancesService()
    return _chances_service
