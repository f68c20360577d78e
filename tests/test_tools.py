import pytest

from fittrack.services.tools import (
    DEFAULT_REST_SECONDS,
    KG_PLATES,
    is_plateau,
    plate_calc,
    sessions_without_improvement,
    suggest_rest_seconds,
)


def test_plate_calc_greedy():
    result = plate_calc(20, 100, KG_PLATES)
    assert result["per_side"] == 40
    assert result["plates"] == [20, 20]
    assert result["total"] == 100
    assert result["remainder"] == 0


def test_plate_calc_reports_unloadable_remainder():
    result = plate_calc(20, 101, KG_PLATES)
    assert result["plates"] == [20, 20]
    assert result["total"] == 100
    assert result["remainder"] == pytest.approx(1)


def test_plate_calc_target_below_bar():
    result = plate_calc(20, 15, KG_PLATES)
    assert result == {"per_side": 0.0, "plates": [], "total": 20, "remainder": 0.0}


@pytest.mark.parametrize(
    "name,category,expected",
    [
        ("Barbell Back Squat", None, 180),
        ("Bent Over Row", None, 120),
        ("Bicep Curl", None, 60),
        ("Burpees", None, 30),
        ("Mountain Climber", "Cardio", 30),
        ("Plank", None, 45),
        ("Farmer Walk", None, DEFAULT_REST_SECONDS),
    ],
)
def test_rest_suggestions(name, category, expected):
    assert suggest_rest_seconds(name, category) == expected


def test_rest_preset_wins():
    assert suggest_rest_seconds("Deadlift", None, preset=240) == 240


def test_plateau_detection():
    # newest first
    flat = [(100, 500, 0), (100, 500, 0), (100, 500, 0), (100, 500, 0)]
    assert sessions_without_improvement(flat) == 3
    assert is_plateau(flat)

    improving = [(105, 525, 0), (100, 500, 0), (100, 500, 0), (100, 500, 0)]
    assert sessions_without_improvement(improving) == 0
    assert not is_plateau(improving)

    assert not is_plateau([(100, 500, 0)])
