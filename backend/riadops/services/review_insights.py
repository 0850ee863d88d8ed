"""Review insights — analytics over a Booking.com guest-review export.

The export is a CSV with one review per row ("Review date", "Review score",
six category scores, "Positive review", "Negative review"). Scores are on a
1-10 scale.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from riadops.models.guest import GuestRecord, is_cancelled

logger = logging.getLogger(__name__)

CATEGORY_COLUMNS: tuple[tuple[str, str], ...] = (
    ("staff", "Staff"),
    ("cleanliness", "Cleanliness"),
    ("location", "Location"),
    ("facilities", "Facilities"),
    ("comfort", "Comfort"),
    ("value", "Value for money"),
)

EMPTY_NEGATIVES = {"nada", "nothing", "niente", "rien"}
MAX_EXAMPLES = 3
EXAMPLE_LENGTH = 150
TOP_KEYWORDS = 20


@dataclass(frozen=True)
class IssuePattern:
    pattern: re.Pattern[str]
    category: str
    issue: str


def _issue(pattern: str, category: str, issue: str) -> IssuePattern:
    return IssuePattern(re.compile(pattern, re.IGNORECASE), category, issue)


# A review can hit several issues; every pattern is tested.
ISSUE_PATTERNS: tuple[IssuePattern, ...] = (
    _issue(r"cold|fre[díi]o|freddo|heating|heater|climatiza", "Temperature", "Room too cold / heating issues"),
    _issue(r"hot|calor|caldo|air condition|ac |a/c", "Temperature", "Room too hot / AC issues"),
    _issue(r"noise|ruido|bruit|rumore|loud|music", "Noise", "Noise from outside / neighbors"),
    _issue(r"smell|odor|olor|odeur", "Cleanliness", "Bad smell in room/bathroom"),
    _issue(r"light|luz|luce|lamp|lighting", "Facilities", "Insufficient lighting"),
    _issue(r"bathroom|baño|bagno|shower|douche", "Bathroom", "Bathroom issues (small/maintenance)"),
    _issue(r"window|ventana|finestra|ventilation|ventilación", "Room", "No window / poor ventilation"),
    _issue(r"wifi|internet|connection", "Facilities", "WiFi / internet problems"),
    _issue(r"direction|map|find|encontrar|trouver|lost|perdu", "Access", "Difficult to find / directions"),
    _issue(r"staff|personal|personnel|unfriendly", "Service", "Staff-related feedback"),
    _issue(r"breakfast|desayuno|petit.déjeuner|colazione", "Food", "Breakfast feedback"),
    _issue(r"tax|city.tax|tourist.tax", "Pricing", "City tax surprise"),
    _issue(r"clean|limpi|propre|pulito", "Cleanliness", "Cleanliness concerns"),
    _issue(r"bed|cama|lit|letto|mattress", "Comfort", "Bed/mattress comfort"),
)

POSITIVE_WORDS = (
    "excellent", "amazing", "perfect", "wonderful", "fantastic", "great", "best", "love",
    "beautiful", "delicious", "friendly", "helpful", "clean", "comfortable", "recommend",
    "parfait", "perfecto", "ottimo", "bellissimo", "excelente", "magnifique", "super", "top",
    "bravo",
)
NEGATIVE_WORDS = (
    "bad", "terrible", "awful", "dirty", "cold", "noise", "smell", "problem", "issue",
    "disappointing", "worst", "horrible", "poor", "malo", "mauvais", "brutto", "freddo",
    "rumore",
)


class ReviewsNotFoundError(FileNotFoundError):
    pass


def load_reviews(content: str) -> pd.DataFrame:
    """Parse the review CSV; quoted multi-line comments are kept intact."""
    if not content.strip():
        return pd.DataFrame()
    df = pd.read_csv(io.StringIO(content), dtype=str, keep_default_na=False)
    df.columns = [str(c).strip().strip('"') for c in df.columns]
    for column in df.columns:
        df[column] = df[column].str.strip()
    return df


def read_reviews_file(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise ReviewsNotFoundError(f"No reviews uploaded yet ({path})")
    return load_reviews(path.read_text(encoding="utf-8-sig"))


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series([""] * len(df), index=df.index, dtype=str)


def _numeric(df: pd.DataFrame, name: str) -> pd.Series:
    return pd.to_numeric(_column(df, name), errors="coerce")


def extract_issues(df: pd.DataFrame) -> list[dict]:
    """Count recurring complaints in the negative comments."""
    found: dict[str, dict] = {}
    for text in _column(df, "Negative review"):
        if not text or text.lower() in EMPTY_NEGATIVES:
            continue
        for entry in ISSUE_PATTERNS:
            if not entry.pattern.search(text):
                continue
            item = found.setdefault(
                entry.issue,
                {"issue": entry.issue, "count": 0, "examples": [], "category": entry.category},
            )
            item["count"] += 1
            if len(item["examples"]) < MAX_EXAMPLES and len(text) > 5:
                item["examples"].append(text[:EXAMPLE_LENGTH])
    return sorted(found.values(), key=lambda item: item["count"], reverse=True)


def monthly_ratings(df: pd.DataFrame) -> list[dict]:
    """Average score and category scores per ``YYYY-MM`` of the review date."""
    if df.empty:
        return []
    frame = pd.DataFrame(
        {
            "month": pd.to_datetime(
                _column(df, "Review date"), errors="coerce", format="mixed"
            ).dt.strftime("%Y-%m"),
            "score": _numeric(df, "Review score"),
        }
    )
    for key, column in CATEGORY_COLUMNS:
        values = _numeric(df, column)
        # a category score of 0 means "not rated"
        frame[key] = values.where(values > 0)
    frame = frame.dropna(subset=["month", "score"])

    months = []
    for month, group in frame.groupby("month", sort=True):
        months.append(
            {
                "month": month,
                "avg_score": float(group["score"].mean()),
                "count": int(len(group)),
                "categories": {
                    key: float(group[key].mean()) if group[key].notna().any() else 0.0
                    for key, _ in CATEGORY_COLUMNS
                },
            }
        )
    return months


def analyze_sentiment(df: pd.DataFrame) -> dict:
    """Bucket reviews by score and count sentiment keywords in the comments."""
    scores = _numeric(df, "Review score")
    positive = int((scores >= 9).sum())
    neutral = int(((scores >= 7) & (scores < 9)).sum())
    negative = int(len(scores) - positive - neutral)

    counts: dict[str, dict] = {}
    texts = (_column(df, "Positive review") + " " + _column(df, "Negative review")).str.lower()
    for text in texts:
        for words, sentiment in ((POSITIVE_WORDS, "positive"), (NEGATIVE_WORDS, "negative")):
            for word in words:
                if word in text:
                    item = counts.setdefault(word, {"word": word, "count": 0, "sentiment": sentiment})
                    item["count"] += 1

    keywords = sorted(counts.values(), key=lambda item: item["count"], reverse=True)[:TOP_KEYWORDS]
    return {"positive": positive, "neutral": neutral, "negative": negative, "keywords": keywords}


def score_distribution(df: pd.DataFrame) -> dict[str, int]:
    scores = _numeric(df, "Review score").dropna()
    return {
        "10": int((scores >= 10).sum()),
        "9": int(((scores >= 9) & (scores < 10)).sum()),
        "8": int(((scores >= 8) & (scores < 9)).sum()),
        "7": int(((scores >= 7) & (scores < 8)).sum()),
        "below7": int((scores < 7).sum()),
    }


def monthly_occupancy(records: list[GuestRecord]) -> dict[str, int]:
    """Booked nights per check-in month; cancelled bookings are skipped."""
    nights_by_month: dict[str, int] = {}
    for record in records:
        if not record.get("check_in") or is_cancelled(record.get("status", "")):
            continue
        check_in = pd.to_datetime(record["check_in"], errors="coerce")
        if pd.isna(check_in):
            continue
        nights = 1
        check_out = pd.to_datetime(record.get("check_out") or None, errors="coerce")
        if not pd.isna(check_out):
            nights = max(1, round((check_out - check_in).total_seconds() / 86400))
        month = check_in.strftime("%Y-%m")
        nights_by_month[month] = nights_by_month.get(month, 0) + nights
    return nights_by_month


def pearson(xs: list[float], ys: list[float]) -> float:
    """Pearson coefficient, 0.0 when either series has no variance."""
    if len(xs) < 2:
        return 0.0
    value = pd.Series(xs, dtype=float).corr(pd.Series(ys, dtype=float))
    return 0.0 if pd.isna(value) else float(value)


def interpret_correlation(coefficient: float) -> str:
    strength = abs(coefficient)
    if strength < 0.3:
        return "weak"
    if strength < 0.7:
        return "moderate"
    return "strong"


def rating_occupancy_correlation(months: list[dict], occupancy: dict[str, int]) -> dict:
    """Correlate monthly average rating with booked nights.

    Only computed when more than two months have both figures.
    """
    data = [
        {"month": m["month"], "avg_rating": m["avg_score"], "occupancy_nights": occupancy[m["month"]]}
        for m in months
        if m["month"] in occupancy
    ]
    coefficient = 0.0
    if len(data) > 2:
        coefficient = pearson(
            [d["avg_rating"] for d in data], [d["occupancy_nights"] for d in data]
        )
    return {
        "coefficient": coefficient,
        "interpretation": interpret_correlation(coefficient),
        "data": data,
    }


def build_insights(df: pd.DataFrame, records: list[GuestRecord]) -> dict:
    scores = _numeric(df, "Review score").dropna()
    months = monthly_ratings(df)
    logger.info("Analyzing %d reviews over %d months", len(df), len(months))
    return {
        "total_reviews": int(len(df)),
        "overall_average": float(scores.mean()) if len(scores) else 0.0,
        "distribution": score_distribution(df),
        "issues": extract_issues(df),
        "monthly_ratings": months,
        "sentiment": analyze_sentiment(df),
        "correlation": rating_occupancy_correlation(months, monthly_occupancy(records)),
    }


def store_reviews_file(path: Path, content: bytes) -> int:
    """Save an uploaded export and return its data row count."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return int(len(load_reviews(content.decode("utf-8-sig", errors="replace"))))
