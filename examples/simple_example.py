#!/usr/bin/env python3
"""
Simple Example: Compose a chart in code

Builds a chart with two stacked bar series and a line, moves the legend
around, and writes both a PDF and a PNG.
"""

from pathlib import Path

from chartgen import ChartComposer, ChartConfig, PrintCompositor, Series

composer = ChartComposer(ChartConfig(width=480, height=320), category_axes={0: True})

# Batch the mutations: one layout pass when resumed
composer.suspend_updates(True)
composer.title.text = "Weekly Signups"
composer.add_series(Series("web", "Web", kind="bar", stack_enabled=True, y_values=[12, 18, 9, 22]))
composer.add_series(Series("mobile", "Mobile", kind="bar", stack_enabled=True, y_values=[7, 11, 14, 10],
                           color=(1.0, 0.5, 0.05)))
composer.add_series(Series("goal", "Goal", y_values=[20, 25, 25, 30], line_style="dash", symbol_type="square",
                           color=(0.2, 0.6, 0.2)))
composer.legend.position = "right"
composer.legend.extended = True
composer.suspend_updates(False)

print(f"Legend cell for 'mobile': {composer.legend.get_bounds('mobile')}")

compositor = PrintCompositor(composer)
compositor.save(Path("signups.pdf"))
compositor.save(Path("signups.png"))

print("✓ Chart saved to: signups.pdf, signups.png")
