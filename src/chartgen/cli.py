"""CLI interface for the chart generator."""

import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from chartgen.api.builder import build_chart, legend_layout, render_chart_to_image, render_charts_to_pdf
from chartgen.config import LEGEND_POSITIONS, ORIENTATIONS, ChartDocument, load_document
from chartgen.errors import ChartError
from chartgen.fonts import register_fonts
from chartgen.utils.dimensions import PAGE_SIZES


def _load(document_path: Path) -> ChartDocument:
    try:
        return load_document(document_path)
    except ValidationError as e:
        click.echo(f"Error: Invalid chart document {document_path}:\n{e}", err=True)
        raise SystemExit(1)


def _apply_overrides(
    document: ChartDocument,
    width: float | None,
    height: float | None,
    legend_position: str | None,
    extended: bool | None,
    orientation: str | None,
) -> ChartDocument:
    """Apply command-line overrides to the document's chart settings."""
    chart = document.chart
    updates: dict = {}
    if width is not None:
        updates["width"] = width
    if height is not None:
        updates["height"] = height
    if orientation is not None:
        updates["orientation"] = orientation

    legend_updates: dict = {}
    if legend_position is not None:
        legend_updates["position"] = legend_position
    if extended is not None:
        legend_updates["extended"] = extended
    if legend_updates:
        updates["legend"] = chart.legend.model_copy(update=legend_updates)

    if not updates:
        return document
    return document.model_copy(update={"chart": chart.model_copy(update=updates)})


@click.group()
@click.version_option()
@click.option("-v", "--verbose", is_flag=True, help="Log layout passes and font registration.")
def main(verbose: bool) -> None:
    """Compose charts (title, legend, plot area) and render them to PDF or images."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # Register custom fonts at startup
    register_fonts()


_override_options = [
    click.option("--width", type=float, help="Chart width in device units (overrides the document)."),
    click.option("--height", type=float, help="Chart height in device units (overrides the document)."),
    click.option(
        "--legend-position",
        type=click.Choice(list(LEGEND_POSITIONS), case_sensitive=False),
        help="Edge the legend is docked to.",
    ),
    click.option("--extended/--no-extended", default=None, help="Show current/min/avg/max legend columns."),
    click.option(
        "--orientation",
        type=click.Choice(list(ORIENTATIONS), case_sensitive=False),
        help="Chart orientation.",
    ),
]


def _with_overrides(func):
    for option in reversed(_override_options):
        func = option(func)
    return func


@main.command()
@click.argument("documents", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    required=True,
    help="Output file. .pdf writes one page per chart; image suffixes (.png, .jpg) take a single chart.",
)
@click.option(
    "--page-size",
    type=click.Choice(list(PAGE_SIZES.keys()), case_sensitive=False),
    help="Page size for PDF output. By default each page is the size of its chart.",
)
@_with_overrides
def render(
    documents: tuple[Path, ...],
    output: Path,
    page_size: str | None,
    width: float | None,
    height: float | None,
    legend_position: str | None,
    extended: bool | None,
    orientation: str | None,
) -> None:
    """
    Render chart documents (TOML) to a PDF or an image.

    Each document holds a [chart] table, an [axes] table mapping x-axis ids
    to whether they are category axes, and [[series]] entries.
    """
    try:
        composers = []
        for document_path in documents:
            document = _apply_overrides(_load(document_path), width, height, legend_position, extended, orientation)
            click.echo(f"Composing {document_path}...")
            composers.append(build_chart(document))

        if output.suffix.lower() == ".pdf":
            render_charts_to_pdf(composers, output, page_size=page_size)
        else:
            if len(composers) > 1:
                click.echo("Error: Image output takes a single chart document; use a .pdf output.", err=True)
                raise SystemExit(1)
            render_chart_to_image(composers[0], output)

        click.echo(f"✓ Generated {output}")

    except ChartError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except OSError as e:
        click.echo(f"Error: Could not write {output}: {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("document_path", type=click.Path(exists=True, path_type=Path))
@_with_overrides
def layout(
    document_path: Path,
    width: float | None,
    height: float | None,
    legend_position: str | None,
    extended: bool | None,
    orientation: str | None,
) -> None:
    """Print the packed legend cells of a chart document as JSON."""
    try:
        document = _apply_overrides(_load(document_path), width, height, legend_position, extended, orientation)
        composer = build_chart(document)
    except ChartError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(legend_layout(composer), indent=2))


if __name__ == "__main__":
    main()
