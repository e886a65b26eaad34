#!/usr/bin/env python3
"""
Pipeline Demo: layout -> lint -> compose -> evaluate -> decompose

Shows the full workflow on the example inspection layout:
1. Lint the layout
2. Stage default form state
3. Compose a submission onto the layout (with validation)
4. Score the result
5. Decompose it for storage
"""

import json
import logging

from formlayout.compose import compose
from formlayout.decompose import decompose
from formlayout.examples import build_example_inspection_config, build_example_results
from formlayout.form_state import stage
from formlayout.lint import analyze_config, validate
from formlayout.scoring import evaluate


def print_scores(config):
    """Pretty-print section scores, indenting sub-sections."""
    def walk(sections, indent):
        for section in sections:
            print(f"{' ' * indent}{section.name:<20} {section.total:>6} / {section.weight:<6} {section.ratio:>6}%")
            walk(section.sub_sections, indent + 2)

    walk(config.sections, 3)
    print(f"   {'TOTAL':<20} {config.total:>6} / {config.weight:<6} {config.ratio:>6}%")


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")
    schema = build_example_inspection_config()

    print("=" * 70)
    print(f"FORM LAYOUT PIPELINE: {schema.label}")
    print("=" * 70)

    print("\n1. LINTING LAYOUT...")
    report = analyze_config(schema)
    print(f"   ✓ Sections: {report.total_sections}")
    print(f"   ✓ Items: {report.total_items}")
    print(f"   ✓ Conditions: {report.total_conditions}")
    print(f"   ✓ {validate(schema)}")
    for warning in report.warnings:
        print(f"      - {warning}")

    print("\n2. STAGING DEFAULTS...")
    print(f"   {stage(schema)}")

    print("\n3. COMPOSING SUBMISSION...")
    composed = compose(schema, build_example_results(), validate=True)
    print(f"   ✓ Composed {sum(len(s.items) for s in composed.iter_sections())} items")

    print("\n4. SCORING...")
    print_scores(evaluate(composed))

    print("\n5. DECOMPOSING FOR STORAGE...")
    stored = decompose(composed, allow=["name", "entry", "value"])
    print(json.dumps(stored, indent=2))


if __name__ == "__main__":
    main()
