"""Pydantic v2 schemas for review insight endpoints."""

from typing import Literal

from riadops.schemas.common import CamelModel


class ReviewIssue(CamelModel):
    issue: str
    category: str
    count: int
    examples: list[str]


class CategoryScores(CamelModel):
    staff: float
    cleanliness: float
    location: float
    facilities: float
    comfort: float
    value: float


class MonthlyRating(CamelModel):
    month: str  # YYYY-MM
    avg_score: float
    count: int
    categories: CategoryScores


class SentimentKeyword(CamelModel):
    word: str
    count: int
    sentiment: Literal["positive", "negative"]


class Sentiment(CamelModel):
    positive: int
    neutral: int
    negative: int
    keywords: list[SentimentKeyword]


class CorrelationPoint(CamelModel):
    month: str
    avg_rating: float
    occupancy_nights: int


class Correlation(CamelModel):
    coefficient: float
    interpretation: Literal["weak", "moderate", "strong"]
    data: list[CorrelationPoint]


class ReviewInsightsResponse(CamelModel):
    total_reviews: int
    overall_average: float
    distribution: dict[str, int]
    issues: list[ReviewIssue]
    monthly_ratings: list[MonthlyRating]
    sentiment: Sentiment
    correlation: Correlation


class ReviewUploadResponse(CamelModel):
    success: bool = True
    message: str
    row_count: int
