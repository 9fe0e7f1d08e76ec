"""Tabular export of a generated diet plan (PDF via ReportLab, DataFrame for display)."""
import io
from typing import List
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .prompts import format_value
from .schemas import GenerateDietPlanOutput, Meal
from .utils import compute_totals

DIET_PLAN_COLUMNS = [
    "Meal Time",
    "Food Items",
    "Portion Size",
    "Calories",
    "Protein(g)",
    "Carbs(g)",
    "Fats(g)",
    "Micronutrient Focus",
]

ACCENT_COLOR = colors.HexColor("#2e7d32")

_COL_WIDTHS = [0.9 * inch, 1.8 * inch, 1.0 * inch, 0.65 * inch, 0.7 * inch, 0.65 * inch, 0.6 * inch, 1.2 * inch]
# Columns holding free text from the model; wrapped with Paragraph.
_WRAPPED = {1, 2, 7}


def meal_row(meal: Meal) -> List[str]:
    return [
        meal.meal_time,
        meal.food_items,
        meal.portion_size,
        format_value(meal.calories),
        format_value(meal.protein),
        format_value(meal.carbs),
        format_value(meal.fat),
        meal.micronutrient_focus or "",
    ]


def diet_plan_rows(plan: GenerateDietPlanOutput) -> List[List[str]]:
    """Header row followed by one row of cell text per meal."""
    return [list(DIET_PLAN_COLUMNS)] + [meal_row(meal) for meal in plan.diet_plan]


def diet_plan_dataframe(plan: GenerateDietPlanOutput) -> pd.DataFrame:
    rows = [meal.model_dump() for meal in plan.diet_plan]
    df = pd.DataFrame(rows, columns=list(Meal.model_fields))
    return df.round({"calories": 0, "protein": 1, "carbs": 1, "fat": 1})


def diet_plan_table(plan: GenerateDietPlanOutput) -> Table:
    cell_style = ParagraphStyle("Cell", parent=getSampleStyleSheet()["BodyText"], fontSize=8, leading=10)
    rows = diet_plan_rows(plan)
    data = [rows[0]]
    for row in rows[1:]:
        data.append([
            Paragraph(escape(text), cell_style) if i in _WRAPPED else text
            for i, text in enumerate(row)
        ])

    table = Table(data, colWidths=_COL_WIDTHS, repeatRows=1, hAlign="LEFT")
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), ACCENT_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ALIGN", (3, 1), (6, -1), "RIGHT"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f1f8e9")]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ]))
    return table


def export_diet_plan_pdf(plan: GenerateDietPlanOutput, title: str = "NutriSnap Diet Plan") -> bytes:
    """Render the plan as a paginated, letter-size PDF."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=letter,
        title=title,
        leftMargin=36,
        rightMargin=36,
        topMargin=40,
        bottomMargin=36,
    )
    styles = getSampleStyleSheet()
    totals = compute_totals(diet_plan_dataframe(plan))
    story = [
        Paragraph(escape(title), styles["Title"]),
        Spacer(1, 12),
        diet_plan_table(plan),
        Spacer(1, 12),
        Paragraph(
            f"Daily total: {format_value(totals['calories'])} kcal, "
            f"{format_value(totals['protein'])} g protein, "
            f"{format_value(totals['carbs'])} g carbs, "
            f"{format_value(totals['fat'])} g fat",
            styles["Normal"],
        ),
    ]
    doc.build(story)
    return buf.getvalue()
