#!/usr/bin/env python3
"""Sample dataset generator for local runs and demos.

Writes the three uploads the pipeline expects into one directory:
- legacy.xlsx      Legacy course data (Reporting (L) column)
- modern.xlsx      Modern course data (Reporting (M) column)
- time_spent.xlsx  Time spent category entries

A share of the Modern rows repeat Legacy course names for the same year so
the duplicate-precedence path is exercised, and some time entries name
courses that exist in neither file so In Progress instances appear.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

VERTICALS = ["Safety", "Compliance", "Leadership", "Sales", "Onboarding"]
AUTHORING_TOOLS = ["Rise", "Storyline", "Captivate"]
SMES = ["A. Rivera", "B. Chen", "C. Okafor", "D. Novak"]
CATEGORIES = ["Design", "Development", "Review", "QA", "Meetings"]
COURSE_LENGTHS = ["30 mins", "1-2 hours", "45 minutes", "less than 1 hour", "3 hours"]
USERS = ["alex", "sam", "jo", "kim"]


def _course_names(count: int, prefix: str) -> list[str]:
    topics = ["Fire Safety", "Data Privacy", "Coaching", "Negotiation", "Ethics", "Forklift", "Onboarding"]
    return [f"{topics[i % len(topics)]} {prefix}{100 + i}" for i in range(count)]


def generate_course_frame(
    names: list[str], years: list[int], reporting_column: str, rng: np.random.Generator,
) -> pd.DataFrame:
    """One course file: name, total time, reporting date and a few metadata columns."""
    rows = len(names)
    data: dict[str, list[Any]] = {
        "Course Name": names,
        "Total Time": np.round(rng.uniform(2, 80, rows), 2).tolist(),
        reporting_column: [f"{y}-{rng.integers(1, 13):02d}-15" for y in years],
        "Status": rng.choice(["Completed", "Completed", "Retired"], rows).tolist(),
        "[LCT] Vertical": rng.choice(VERTICALS, rows).tolist(),
        "Authoring Tool": rng.choice(AUTHORING_TOOLS, rows).tolist(),
        "SME": rng.choice(SMES, rows).tolist(),
        "Course Length": rng.choice(COURSE_LENGTHS, rows).tolist(),
    }
    return pd.DataFrame(data)


def generate_time_entries(course_names: list[str], entries_per_course: int, rng: np.random.Generator) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for name in course_names:
        for _ in range(entries_per_course):
            rows.append({
                "Course": name,
                "Category": str(rng.choice(CATEGORIES)),
                "Hours": round(float(rng.uniform(0.25, 6)), 2),
                "User": str(rng.choice(USERS)),
            })
    return pd.DataFrame(rows)


def create_dataset(output_dir: Path, courses: int, entries_per_course: int, seed: int = 42) -> dict[str, Path]:
    """Write legacy.xlsx, modern.xlsx and time_spent.xlsx into output_dir."""
    rng = np.random.default_rng(seed)
    output_dir.mkdir(parents=True, exist_ok=True)

    legacy_names = _course_names(courses, "L")
    legacy_years = rng.choice([2022, 2023, 2024], courses).tolist()
    legacy = generate_course_frame(legacy_names, legacy_years, "Reporting (L)", rng)

    # every fifth Modern row collides with a Legacy instance
    modern_names = _course_names(courses, "M")
    modern_years = rng.choice([2024, 2025], courses).tolist()
    for i in range(0, courses, 5):
        modern_names[i] = legacy_names[i]
        modern_years[i] = legacy_years[i]
    modern = generate_course_frame(modern_names, modern_years, "Reporting (M)", rng)

    in_progress_names = [f"Draft Module {i + 1}" for i in range(max(1, courses // 10))]
    time_spent = generate_time_entries(legacy_names[: courses // 2] + in_progress_names, entries_per_course, rng)

    paths = {
        "legacy": output_dir / "legacy.xlsx",
        "modern": output_dir / "modern.xlsx",
        "time_spent": output_dir / "time_spent.xlsx",
    }
    for key, frame in (("legacy", legacy), ("modern", modern), ("time_spent", time_spent)):
        with pd.ExcelWriter(paths[key], engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name="Sheet1", index=False)
        print(f"Created {paths[key]} ({len(frame)} rows)")
    return paths


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate sample Legacy/Modern/Time Spent uploads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/sample
  %(prog)s data/large --courses 2000 --entries 8 --seed 7
        """,
    )
    parser.add_argument("output_dir", type=Path, help="Directory to write the three files into")
    parser.add_argument("--courses", type=int, default=50, help="Courses per course file (default: 50)")
    parser.add_argument("--entries", type=int, default=4, help="Time entries per course (default: 4)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.courses <= 0:
        print("Error: --courses must be positive", file=sys.stderr)
        return 1
    if args.entries <= 0:
        print("Error: --entries must be positive", file=sys.stderr)
        return 1

    try:
        create_dataset(args.output_dir, args.courses, args.entries, args.seed)
    except OSError as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
