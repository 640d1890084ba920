from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.models import Feedback
from restaurant_os.schemas.feedback import FeedbackCreate, FeedbackRead, FeedbackSummary

SUMMARY_WINDOW = 50
RECENT_COMMENTS = 3


async def create_feedback(db: AsyncSession, tenant_id: str, feedback_in: FeedbackCreate) -> Feedback:
    comment = (feedback_in.comment or "").strip() or None
    feedback = Feedback(tenant_id=tenant_id, rating=feedback_in.rating, comment=comment)
    db.add(feedback)
    await db.commit()
    await db.refresh(feedback)
    return feedback


async def get_feedback_summary(db: AsyncSession, tenant_id: str) -> FeedbackSummary:
    """
    Average over the latest 50 ratings, rounded to one decimal,
    plus the three newest ratings that carry a comment.
    """
    result = await db.execute(
        select(Feedback)
        .where(Feedback.tenant_id == tenant_id)
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        .limit(SUMMARY_WINDOW)
    )
    rows = list(result.scalars().all())
    if not rows:
        return FeedbackSummary(average_rating=0, total_feedback=0)

    average = sum(f.rating for f in rows) / len(rows)
    return FeedbackSummary(
        average_rating=round(average, 1),
        total_feedback=len(rows),
        recent_comments=[FeedbackRead.model_validate(f) for f in rows if f.comment][:RECENT_COMMENTS],
    )
