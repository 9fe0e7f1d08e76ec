#!/usr/bin/env python3
"""
NutriSnap command-line entry point.

    python nutrisnap.py analyze --description "chicken breast"
    python nutrisnap.py analyze --image lunch.jpg
    python nutrisnap.py plan --age 30 --gender male --height 180 --weight 80 \\
        --activity-level moderatelyActive --health-goal muscleBuilding --pdf plan.pdf
    python nutrisnap.py lookup apple
"""
import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from nutrisnap_core.config import configure_logging, load_settings
from nutrisnap_core.errors import GatewayError
from nutrisnap_core.export import diet_plan_rows, export_diet_plan_pdf
from nutrisnap_core.flows import NutriSnap
from nutrisnap_core.food_database import build_food_lookup
from nutrisnap_core.utils import file_to_data_uri, recommended_protein_g

PLAN_TEXT_OPTIONS = [
    "food_choices",
    "foods_to_avoid",
    "favorite_foods",
    "meal_preferences",
    "snacking_habits",
    "dietary_restrictions",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nutrisnap", description="Food analysis and diet plans.")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="identify a food and estimate its macros")
    analyze.add_argument("--image", type=Path, help="photo of the food")
    analyze.add_argument("--description", help="description of the food")

    plan = sub.add_parser("plan", help="generate a personalized diet plan")
    plan.add_argument("--age", type=int, required=True)
    plan.add_argument("--gender", required=True)
    plan.add_argument("--height", type=float, required=True, help="centimeters")
    plan.add_argument("--weight", type=float, required=True, help="kilograms")
    plan.add_argument("--activity-level", required=True)
    plan.add_argument("--health-goal", required=True)
    plan.add_argument("--target-caloric-intake", type=float)
    for option in PLAN_TEXT_OPTIONS:
        plan.add_argument("--" + option.replace("_", "-"))
    plan.add_argument("--pdf", type=Path, help="write the plan as a PDF table")

    lookup = sub.add_parser("lookup", help="search the food database")
    lookup.add_argument("query")
    return parser


def image_payload(args) -> dict:
    payload = {"photoDataUri": ""}
    if args.image:
        mime_type = mimetypes.guess_type(args.image.name)[0] or "image/jpeg"
        payload["photoDataUri"] = file_to_data_uri(args.image.read_bytes(), mime_type)
    if args.description:
        payload["description"] = args.description
    return payload


def plan_payload(args) -> dict:
    payload = {
        "age": args.age,
        "gender": args.gender,
        "height": args.height,
        "weight": args.weight,
        "activity_level": args.activity_level,
        "health_goal": args.health_goal,
    }
    for option in PLAN_TEXT_OPTIONS + ["target_caloric_intake"]:
        value = getattr(args, option)
        if value is not None:
            payload[option] = value
    return payload


async def run(args, settings) -> int:
    if args.command == "lookup":
        items = await build_food_lookup(settings.food_lookup).search(args.query)
        print(json.dumps([item.model_dump(by_alias=True) for item in items], indent=2))
        return 0

    if args.command == "analyze":
        if not args.image and not args.description:
            print("❌ Provide --image and/or --description")
            return 2
        print("🤖 Analyzing...")
        async with NutriSnap.from_settings(settings) as snap:
            result = await snap.analyze_food_image(image_payload(args))
        print(json.dumps(result.model_dump(by_alias=True), indent=2))
        return 0

    print("🤖 Generating diet plan...")
    async with NutriSnap.from_settings(settings) as snap:
        plan = await snap.generate_diet_plan(plan_payload(args))
    for row in diet_plan_rows(plan):
        print(" | ".join(row))
    print(f"\nRecommended protein: {recommended_protein_g(args.weight)} g/day")
    if args.pdf:
        args.pdf.write_bytes(export_diet_plan_pdf(plan))
        print(f"✅ Saved to {args.pdf}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        return asyncio.run(run(args, settings))
    except GatewayError as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
