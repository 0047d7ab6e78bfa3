from pydantic import BaseModel, computed_field


class GradeStats(BaseModel):
    """
    Aggregate performance of one assignment's submissions.

    avg_score and pass_rate hold exact values; the *_display fields round
    them to one decimal for dashboards.
    """
    avg_score: float
    max_observed: int
    min_observed: int
    pass_rate: float
    distribution: list[int]
    graded_count: int
    total: int

    model_config = {
        "frozen": True
    }

    @computed_field
    @property
    def avg_score_display(self) -> float:
        return round(self.avg_score, 1)

    @computed_field
    @property
    def pass_rate_display(self) -> float:
        return round(self.pass_rate, 1)
