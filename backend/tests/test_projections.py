"""Corpus projection and goal tracking tests."""

from __future__ import annotations

import pytest

from asset_tracker.projections import (
    DEFAULT_GOALS,
    GROWTH_RATES,
    HORIZONS,
    Goal,
    evaluate_goal,
    goal_projections,
    project_corpus,
    projection_table,
)


def test_project_corpus_compounds_annually():
    assert project_corpus(100_000, 10, 10) == pytest.approx(259_374.25, abs=0.01)
    assert project_corpus(100_000, 0, 12) == 100_000


def test_projection_table_covers_every_horizon_and_rate():
    table = projection_table(50_000)
    assert list(table) == list(HORIZONS)
    assert all(list(row) == list(GROWTH_RATES) for row in table.values())
    assert table[5][8.0] == pytest.approx(50_000 * 1.08**5)


def test_goal_on_track_with_progress_capped():
    goal = Goal("education", "Children's Education", 500_000, 10)
    progress = evaluate_goal(300_000, goal, 8.0)
    assert progress.projected == pytest.approx(647_677, abs=10)
    assert progress.on_track is True
    assert progress.progress_pct == 100.0


def test_goal_behind_reports_partial_progress():
    goal = Goal("retirement", "Retirement Fund", 3_000_000, 20)
    progress = evaluate_goal(100_000, goal, 10.0)
    assert progress.on_track is False
    assert progress.progress_pct == pytest.approx(100_000 * 1.1**20 / 3_000_000 * 100)


def test_goal_projections_default_goals():
    projections = goal_projections(1_000_000)
    assert [item.goal.key for item in projections] == [goal.key for goal in DEFAULT_GOALS]
    assert all(len(item.progress) == len(GROWTH_RATES) for item in projections)
    assert projections[0].progress[0].on_track is True
