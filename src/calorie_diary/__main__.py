"""Punto de entrada del diario de calorías."""

from __future__ import annotations

from calorie_diary.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
