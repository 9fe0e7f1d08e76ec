# unit_tests/test_export.py
"""
Unit Tests for the diet plan export
===================================
Run with: python -m pytest unit_tests/test_export.py -v
"""

import re

import pytest
from reportlab.platypus import Paragraph

from nutrisnap_core.export import (
    ACCENT_COLOR,
    DIET_PLAN_COLUMNS,
    diet_plan_dataframe,
    diet_plan_rows,
    diet_plan_table,
    export_diet_plan_pdf,
)
from nutrisnap_core.schemas import GenerateDietPlanOutput
from nutrisnap_core.utils import compute_totals, recommended_protein_g


@pytest.fixture
def plan(diet_plan_reply):
    return GenerateDietPlanOutput.model_validate(diet_plan_reply)


def _cell_text(cell):
    return cell.getPlainText() if isinstance(cell, Paragraph) else cell


def test_rows_follow_fixed_column_order(plan):
    rows = diet_plan_rows(plan)
    assert rows[0] == DIET_PLAN_COLUMNS
    assert rows[1] == [
        "Breakfast",
        "Oats, banana & whey",
        "1 bowl",
        "450",
        "35",
        "60",
        "8.5",
        "Rich in Fiber",
    ]
    assert rows[2][-1] == ""


def test_table_cells_round_trip_meal_fields(plan):
    table = diet_plan_table(plan)
    cells = [[_cell_text(cell) for cell in row] for row in table._cellvalues]

    assert cells[0] == DIET_PLAN_COLUMNS
    for meal, row in zip(plan.diet_plan, cells[1:]):
        assert row[0] == meal.meal_time
        assert row[1] == meal.food_items
        assert row[3] == f"{meal.calories:g}"


def test_header_row_uses_accent_color(plan):
    table = diet_plan_table(plan)
    assert any(cmd[0] == "BACKGROUND" and cmd[-1] == ACCENT_COLOR for cmd in table._bkgrndcmds)
    assert table.repeatRows == 1


def test_pdf_export(plan):
    pdf = export_diet_plan_pdf(plan, title="Plan for Sam")
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_long_plans_paginate(diet_plan_reply):
    meals = diet_plan_reply["dietPlan"] * 40
    pdf = export_diet_plan_pdf(GenerateDietPlanOutput.model_validate({"dietPlan": meals}))
    page_counts = [int(n) for n in re.findall(rb"/Count (\d+)", pdf)]
    assert max(page_counts) >= 2


def test_dataframe_and_totals(plan):
    df = diet_plan_dataframe(plan)
    assert list(df.columns[:3]) == ["meal_time", "food_items", "portion_size"]
    assert compute_totals(df) == {"calories": 1070, "protein": 87, "carbs": 130, "fat": 20.5}


def test_recommended_protein():
    assert recommended_protein_g(80) == 128
    assert recommended_protein_g(62.5) == 100
