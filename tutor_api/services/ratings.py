"""Tutor rating aggregate.

``TutorProfile.rating`` and ``TutorProfile.total_reviews`` are derived from
the tutor's review rows and are written nowhere else. Every recompute reads
the full set of stored ratings, so the aggregate always equals the mean of
the reviews visible to the current transaction.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from tutor_api.database import utcnow
from tutor_api.models.review import Review
from tutor_api.models.tutor_profile import TutorProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingSummary:
    rating: float | None
    review_count: int


def summarize_ratings(db: Session, tutor_id: uuid.UUID) -> RatingSummary:
    average, count = db.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.tutor_id == tutor_id)
    ).one()
    count = int(count or 0)
    if count == 0:
        return RatingSummary(rating=None, review_count=0)
    return RatingSummary(rating=float(average), review_count=count)


def recompute_tutor_rating(db: Session, tutor_id: uuid.UUID, now: datetime | None = None) -> RatingSummary:
    """Replace the tutor's rating and review count with freshly computed values.

    Does not commit; the caller owns the transaction so the review insert
    and the aggregate write land together.
    """
    summary = summarize_ratings(db, tutor_id)
    db.execute(
        update(TutorProfile)
        .where(TutorProfile.id == tutor_id)
        .values(rating=summary.rating, total_reviews=summary.review_count, updated_at=now or utcnow())
        .execution_options(synchronize_session=False)
    )
    logger.info(
        "Recomputed rating for tutor %s: rating=%s reviews=%d",
        tutor_id,
        summary.rating,
        summary.review_count,
    )
    return summary
