import pytest

from yclick.data.schema import Visit
from yclick.viz.diagnostics import (
    article_click_counts,
    displayed_in_pool_rate,
    pool_size_distribution,
    run_diagnostics,
    top_articles_by_impressions,
)


def _visit(displayed, clicked, pool, day="20090501", user=None):
    return Visit(
        day=day,
        timestamp=1,
        displayed_article=displayed,
        user_clicked=clicked,
        user=user or [1.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        articles={aid: [0.0] * 6 for aid in pool},
    )


@pytest.fixture
def visits():
    return [
        _visit("a", 1, ["a", "b"]),
        _visit("a", 0, ["a", "b", "c"]),
        _visit("b", 0, ["a"], user=[0.0, 1.0, 0.0, 0.0, 0.0, 0.0]),
        _visit("c", 1, ["c"], day="20090502"),
    ]


def test_article_click_counts(visits):
    assert article_click_counts(visits) == {"a": (2, 1), "b": (1, 0), "c": (1, 1)}


def test_top_articles_sorted_by_impressions_then_id(visits):
    top = top_articles_by_impressions(visits, 2)
    assert [t["article_id"] for t in top] == ["a", "b"]
    assert top[0]["ctr"] == 0.5


def test_pool_sizes_and_displayed_rate(visits):
    assert pool_size_distribution(visits).tolist() == [2, 3, 1, 1]
    assert displayed_in_pool_rate(visits) == 0.75


def test_run_diagnostics_summary_and_figures(visits, tmp_path):
    summary = run_diagnostics(visits, figs_dir=tmp_path / "figs", top_k=3)

    assert summary.n_visits == 4
    assert summary.n_clicks == 2
    assert summary.ctr == 0.5
    assert summary.n_days == 2
    assert summary.n_displayed_articles == 3
    assert summary.mean_pool_size == pytest.approx(1.75)
    assert summary.median_pool_size == 1.5
    assert summary.user_feature_means == pytest.approx([0.75, 0.25, 0.0, 0.0, 0.0, 0.0])
    assert (tmp_path / "figs" / "pool_size_distribution.png").exists()
    assert (tmp_path / "figs" / "article_ctr.png").exists()


def test_run_diagnostics_empty():
    summary = run_diagnostics([], figs_dir=None)
    assert summary.n_visits == 0
    assert summary.ctr == 0.0
    assert summary.top_articles == []
    assert summary.user_feature_means == []
