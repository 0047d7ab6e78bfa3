from typing import Iterable, List

from app.models import AssignmentSubmission, SubmissionStatus
from app.schemas.grade_stats import GradeStats

# Lower bound of each bucket in tenths of max_score, checked top-down
BUCKET_THRESHOLDS = (9, 8, 7, 6)
BUCKET_LABELS = ("excellent", "good", "average", "passing", "failing")
PASS_THRESHOLD = 6


def _at_least(score: int, tenths: int, max_score: int) -> bool:
    # score >= tenths/10 * max_score, kept in integers
    return 10 * score >= tenths * max_score


def score_bucket(score: int, max_score: int) -> int:
    """
    Index of the distribution bucket a score falls in (0 = excellent, 4 = failing).
    """
    for index, tenths in enumerate(BUCKET_THRESHOLDS):
        if _at_least(score, tenths, max_score):
            return index
    return len(BUCKET_THRESHOLDS)


def score_label(score: int, max_score: int) -> str:
    return BUCKET_LABELS[score_bucket(score, max_score)]


def summarize(submissions: Iterable[AssignmentSubmission], max_score: int) -> GradeStats:
    """
    Aggregate grades over a submission collection.

    Only graded submissions contribute scores; `total` counts every
    submission passed in. The result does not depend on input order.
    """
    submissions = list(submissions)
    scores: List[int] = [
        s.score for s in submissions if s.status == SubmissionStatus.GRADED
    ]
    total = len(submissions)
    graded_count = len(scores)

    if graded_count == 0:
        return GradeStats(
            avg_score=0,
            max_observed=0,
            min_observed=0,
            pass_rate=0,
            distribution=[0, 0, 0, 0, 0],
            graded_count=0,
            total=total,
        )

    distribution = [0] * len(BUCKET_LABELS)
    for score in scores:
        distribution[score_bucket(score, max_score)] += 1

    passed = sum(1 for score in scores if _at_least(score, PASS_THRESHOLD, max_score))

    return GradeStats(
        avg_score=sum(scores) / graded_count,
        max_observed=max(scores),
        min_observed=min(scores),
        pass_rate=100 * passed / graded_count,
        distribution=distribution,
        graded_count=graded_count,
        total=total,
    )
