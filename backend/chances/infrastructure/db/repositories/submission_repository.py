"""
Admission Submission Repository

Aggregates self-reported outcomes of applicants with stats similar to the
requester into one peer-cohort row per school.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chances.domain.cohort import PeerCohortQuery
from chances.domain.scoring.interfaces import SimilarProfileStats
from chances.infrastructure.db.models.admission_submission import (
    AdmissionDecision,
    AdmissionSubmission,
    ApplicationRound,
    SubmissionStatus,
)
from chances.infrastructure.db.repositories.base_repository import BaseRepository
from chances.infrastructure.exceptions import DatabaseError


logger = logging.getLogger(__name__)


class SubmissionRepository(BaseRepository[AdmissionSubmission]):
    """
    Repository for admission submissions.

    Args:
        session: Async database session
        gpa_tolerance: Half-width of the GPA match window
        sat_tolerance: Half-width of the SAT match window
        act_tolerance: Half-width of the ACT match window
        pending_review_delay_hours: Age after which unreviewed rows count
        clock: Returns the current UTC time
    """

    def __init__(
        self,
        session: AsyncSession,
        gpa_tolerance: float = 0.15,
        sat_tolerance: int = 80,
        act_tolerance: int = 3,
        pending_review_delay_hours: int = 2,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        super().__init__(AdmissionSubmission, session)
        self.gpa_tolerance = gpa_tolerance
        self.sat_tolerance = sat_tolerance
        self.act_tolerance = act_tolerance
        self.pending_review_delay_hours = pending_review_delay_hours
        self._clock = clock

    def visibility_condition(self):
        """Visible rows, plus pending rows older than the review delay."""
        cutoff = self._clock() - timedelta(hours=self.pending_review_delay_hours)
        return or_(
            AdmissionSubmission.submission_status == SubmissionStatus.VISIBLE,
            and_(
                AdmissionSubmission.submission_status == SubmissionStatus.PENDING_REVIEW,
                AdmissionSubmission.created_at < cutoff,
            ),
        )

    def build_conditions(
        self,
        query: PeerCohortQuery,
        user_id: Optional[UUID] = None,
    ) -> list:
        """WHERE clauses for the cohort. Absent stats apply no filter."""
        conditions = [self.visibility_condition()]

        if query.gpa_unweighted is not None:
            gpa_low = Decimal(f"{query.gpa_unweighted - self.gpa_tolerance:.2f}")
            gpa_high = Decimal(f"{query.gpa_unweighted + self.gpa_tolerance:.2f}")
            conditions.append(
                AdmissionSubmission.gpa_unweighted.between(gpa_low, gpa_high)
            )

        if query.sat_score is not None:
            conditions.append(
                AdmissionSubmission.sat_score.between(
                    query.sat_score - self.sat_tolerance,
                    query.sat_score + self.sat_tolerance,
                )
            )

        if query.act_score is not None:
            conditions.append(
                AdmissionSubmission.act_score.between(
                    query.act_score - self.act_tolerance,
                    query.act_score + self.act_tolerance,
                )
            )

        if query.intended_major:
            conditions.append(
                AdmissionSubmission.intended_major.icontains(
                    query.intended_major, autoescape=True
                )
            )

        if query.admission_cycle:
            conditions.append(
                AdmissionSubmission.admission_cycle == query.admission_cycle
            )

        if user_id is not None:
            conditions.append(AdmissionSubmission.user_id == user_id)

        return conditions

    async def get_similar_profile_stats(
        self,
        query: PeerCohortQuery,
        user_id: Optional[UUID] = None,
    ) -> List[SimilarProfileStats]:
        """
        Aggregate similar applicants' outcomes per school.

        Args:
            query: Cohort centre values
            user_id: Restrict to one user's submissions (own-row exclusion)

        Returns:
            One SimilarProfileStats per school with at least one match

        Raises:
            DatabaseError: If the query fails
        """
        decision = AdmissionSubmission.decision
        app_round = AdmissionSubmission.application_round
        accepted = decision == AdmissionDecision.ACCEPTED

        def count_where(condition):
            return func.count(case((condition, 1)))

        stmt = (
            select(
                AdmissionSubmission.school_id,
                func.count().label("total_similar"),
                count_where(accepted).label("accepted"),
                count_where(decision == AdmissionDecision.REJECTED).label("rejected"),
                count_where(decision == AdmissionDecision.WAITLISTED).label("waitlisted"),
                count_where(
                    and_(accepted, app_round == ApplicationRound.EARLY_DECISION)
                ).label("accepted_early_decision"),
                count_where(
                    and_(accepted, app_round == ApplicationRound.EARLY_ACTION)
                ).label("accepted_early_action"),
                count_where(
                    and_(accepted, app_round == ApplicationRound.REGULAR)
                ).label("accepted_regular"),
            )
            .where(and_(*self.build_conditions(query, user_id)))
            .group_by(AdmissionSubmission.school_id)
        )

        try:
            result = await self._session.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"[PEER-STATS] Failed to aggregate similar profiles: {e}")
            raise DatabaseError(
                "Failed to aggregate similar profiles",
                operation="select",
                table="admission_submissions",
                original_error=e,
            ) from e

        return [
            SimilarProfileStats(
                school_id=str(row.school_id),
                total_similar=int(row.total_similar),
                accepted=int(row.accepted),
                rejected=int(row.rejected),
                waitlisted=int(row.waitlisted),
                accepted_early_decision=int(row.accepted_early_decision),
                accepted_early_action=int(row.accepted_early_action),
                accepted_regular=int(row.accepted_regular),
            )
            for row in rows
        ]
