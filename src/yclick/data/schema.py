from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

FIELDS = ("day", "timestamp", "displayed_article", "user_clicked", "user", "articles")


@dataclass(frozen=True)
class IndexedValue:
    index: int  # 1-based feature index as it appears in the log
    value: float


@dataclass
class ArticleContext:
    article_id: str  # raw digit string, never reparsed
    features: List[float]


@dataclass
class Visit:
    """
    One parsed log line: a single user/article impression event.
    """
    day: str
    timestamp: int
    displayed_article: str
    user_clicked: int
    user: List[float]
    articles: Dict[str, List[float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "timestamp": self.timestamp,
            "displayed_article": self.displayed_article,
            "user_clicked": self.user_clicked,
            "user": list(self.user),
            "articles": {aid: list(vec) for aid, vec in self.articles.items()},
        }

    @classmethod
    def from_dict(cls, obj: Dict[str, Any], dim: Optional[int] = None) -> "Visit":
        """
        Inverse of to_dict. Raises ValueError on missing fields or, when dim is
        given, on vectors of the wrong length.
        """
        if not isinstance(obj, dict):
            raise ValueError(f"visit record must be an object, got {type(obj).__name__}")
        missing = [k for k in FIELDS if k not in obj]
        if missing:
            raise ValueError(f"missing_fields:{','.join(missing)}")

        articles = obj["articles"]
        if not isinstance(articles, dict):
            raise ValueError("articles must be an object keyed by article id")

        user = _vector(obj["user"], "user", dim)
        try:
            timestamp = int(obj["timestamp"])
            user_clicked = int(obj["user_clicked"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"bad_integer_field:{e}") from e

        return cls(
            day=str(obj["day"]),
            timestamp=timestamp,
            displayed_article=str(obj["displayed_article"]),
            user_clicked=user_clicked,
            user=user,
            articles={str(aid): _vector(vec, f"articles[{aid}]", dim) for aid, vec in articles.items()},
        )


def _vector(raw: Any, name: str, dim: Optional[int]) -> List[float]:
    if not isinstance(raw, list):
        raise ValueError(f"{name} must be an array of numbers")
    if dim is not None and len(raw) != dim:
        raise ValueError(f"{name} has length {len(raw)}, expected {dim}")
    try:
        return [float(x) for x in raw]
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} has a non-numeric entry: {e}") from e
