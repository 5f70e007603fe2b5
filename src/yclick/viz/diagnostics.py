from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt

from yclick.data.schema import Visit


@dataclass
class DiagnosticsSummary:
    n_visits: int
    n_clicks: int
    ctr: float
    n_days: int
    n_displayed_articles: int
    mean_pool_size: float
    median_pool_size: float
    displayed_in_pool_rate: float
    user_feature_means: List[float] = field(default_factory=list)
    top_articles: List[Dict] = field(default_factory=list)


def article_click_counts(visits: List[Visit]) -> Dict[str, Tuple[int, int]]:
    """
    displayed_article -> (impressions, clicks).

    Only the displayed article counts as an impression; the rest of the pool
    was a candidate, not shown.
    """
    counts: Dict[str, List[int]] = {}
    for v in visits:
        c = counts.setdefault(v.displayed_article, [0, 0])
        c[0] += 1
        if v.user_clicked:
            c[1] += 1
    return {aid: (imp, clk) for aid, (imp, clk) in counts.items()}


def top_articles_by_impressions(visits: List[Visit], k: int) -> List[Dict]:
    counts = article_click_counts(visits)
    # ties broken by article id so output is stable
    ranked = sorted(counts.items(), key=lambda x: (-x[1][0], x[0]))[:k]
    return [
        {"article_id": aid, "impressions": imp, "clicks": clk, "ctr": clk / imp}
        for aid, (imp, clk) in ranked
    ]


def pool_size_distribution(visits: List[Visit]) -> np.ndarray:
    return np.array([len(v.articles) for v in visits], dtype=np.int32)


def displayed_in_pool_rate(visits: List[Visit]) -> float:
    if not visits:
        return 0.0
    hits = sum(1 for v in visits if v.displayed_article in v.articles)
    return float(hits / len(visits))


def user_feature_means(visits: List[Visit]) -> np.ndarray:
    if not visits:
        return np.zeros(0, dtype=np.float64)
    mat = np.array([v.user for v in visits], dtype=np.float64)
    return mat.mean(axis=0)


def plot_pool_size_hist(sizes: np.ndarray, outpath: Path, title: str = "Candidate pool size per visit") -> None:
    outpath.parent.mkdir(parents=True, exist_ok=True)

    plt.figure()
    bins = np.arange(sizes.min(), sizes.max() + 2) - 0.5 if sizes.size else 10
    plt.hist(sizes, bins=bins)
    plt.xlabel("articles in pool")
    plt.ylabel("Number of visits")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath, dpi=160)
    plt.close()


def plot_article_ctr_bar(top: List[Dict], outpath: Path, title: str = "CTR of most shown articles") -> None:
    outpath.parent.mkdir(parents=True, exist_ok=True)

    plt.figure(figsize=(max(6.0, 0.4 * len(top)), 4.0))
    plt.bar([t["article_id"] for t in top], [t["ctr"] for t in top])
    plt.xticks(rotation=90)
    plt.ylabel("CTR (clicks / impressions)")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath, dpi=160)
    plt.close()


def run_diagnostics(
    visits: List[Visit],
    figs_dir: Optional[Path] = None,
    top_k: int = 20,
) -> DiagnosticsSummary:
    """
    Summary stats over parsed visits; with figs_dir, also writes 2 figures.
    """
    n_visits = len(visits)
    n_clicks = int(sum(1 for v in visits if v.user_clicked))
    sizes = pool_size_distribution(visits)
    top = top_articles_by_impressions(visits, top_k)

    if figs_dir is not None and n_visits:
        plot_pool_size_hist(sizes, figs_dir / "pool_size_distribution.png")
        plot_article_ctr_bar(top, figs_dir / "article_ctr.png")

    return DiagnosticsSummary(
        n_visits=n_visits,
        n_clicks=n_clicks,
        ctr=float(n_clicks / n_visits) if n_visits else 0.0,
        n_days=len({v.day for v in visits}),
        n_displayed_articles=len({v.displayed_article for v in visits}),
        mean_pool_size=float(np.mean(sizes)) if sizes.size else 0.0,
        median_pool_size=float(np.median(sizes)) if sizes.size else 0.0,
        displayed_in_pool_rate=displayed_in_pool_rate(visits),
        user_feature_means=[float(x) for x in user_feature_means(visits)],
        top_articles=top,
    )
