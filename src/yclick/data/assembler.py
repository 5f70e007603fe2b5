from __future__ import annotations
from typing import Dict, Iterable, List

from yclick.data.schema import ArticleContext, Visit


def assemble_visit(
    day: str,
    timestamp: int,
    displayed_article: str,
    user_clicked: int,
    user: List[float],
    articles: Iterable[ArticleContext],
) -> Visit:
    """
    Build the final Visit. Article contexts are keyed by id in line order, so a
    repeated id keeps the later context. The displayed article is not required
    to appear among them (the log sometimes omits its own context).
    """
    by_id: Dict[str, List[float]] = {}
    for a in articles:
        by_id[a.article_id] = list(a.features)

    return Visit(
        day=day,
        timestamp=timestamp,
        displayed_article=displayed_article,
        user_clicked=user_clicked,
        user=list(user),
        articles=by_id,
    )
