"""NutriSnap domain layer: schemas, prompts, food lookup, flows and export."""
