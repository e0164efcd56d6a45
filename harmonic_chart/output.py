"""Output helpers for presenting computed chart data."""

from __future__ import annotations

from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from .analysis.position import format_position
from .models import ChartInput, ChartReport, Houses

SIGN_SYMBOLS = {
    "Aries": "♈",
    "Taurus": "♉",
    "Gemini": "♊",
    "Cancer": "♋",
    "Leo": "♌",
    "Virgo": "♍",
    "Libra": "♎",
    "Scorpio": "♏",
    "Sagittarius": "♐",
    "Capricorn": "♑",
    "Aquarius": "♒",
    "Pisces": "♓",
}


def _format_coord(value: float, positive_label: str, negative_label: str, precision: int = 4) -> str:
    """Return a signed coordinate with cardinal direction."""

    hemi = positive_label if value >= 0 else negative_label
    return f"{abs(value):.{precision}f}° {hemi}"


def _chart_header_lines(report: ChartReport) -> list[str]:
    """Human-readable chart basics for the top of the report."""

    chart: ChartInput | None = report.chart
    lines = []
    if chart is not None:
        lat_str = _format_coord(chart.latitude, "N", "S")
        lon_str = _format_coord(chart.longitude, "E", "W")
        lines += [
            f"Chart: {chart.name}",
            f"UTC:   {chart.datetime_utc.strftime('%Y-%m-%d %H:%M:%S')} (UTC)",
            f"Location: {lat_str}, {lon_str}",
        ]
    else:
        lines.append("Chart")
    lines.append(f"Orb: {report.orb:g}° | Harmonics: 1-{report.max_harmonic}")
    return lines


def _format_matches(matches) -> str:
    return ", ".join(f"{m.name} (H{m.harmonic}, {m.residual:.2f}°)" for m in matches)


def _houses_lines(houses: Houses) -> list[str]:
    lines = [f"House {idx:2d}: {cusp:7.2f}°" for idx, cusp in enumerate(houses.cusps, start=1)]
    lines.append(f"ASC:    {houses.ascendant:.2f}°")
    lines.append(f"MC:     {houses.midheaven:.2f}°")
    lines.append(f"ARMC:   {houses.armc:.2f}°")
    lines.append(f"Vertex: {houses.vertex:.2f}°")
    return lines


def print_text(report: ChartReport) -> None:
    """Plain console listing of body positions and matched harmonic pairs."""

    for line in _chart_header_lines(report):
        print(line)
    print()

    for body in report.bodies:
        pos = report.positions[body.name]
        retro = " R" if body.retrograde else ""
        print(f"{format_position(pos, 'full', body.name)}{retro}  ({body.longitude:.4f}°)")

    print()
    if report.matched:
        print("Harmonic aspects:")
        for first, second in report.matched:
            print(f"  {first.name} - {second.name}: {_format_matches(report.aspects[(first, second)])}")
    else:
        print("Harmonic aspects: none")

    if report.houses is not None:
        print()
        for line in _houses_lines(report.houses):
            print(line)


def print_rich_report(report: ChartReport) -> None:
    """Render the report as Rich tables on the terminal."""

    _render_rich_report(Console(), report, use_sign_symbols=True)


def build_markdown_report(report: ChartReport) -> str:
    """Return a markdown string mirroring the Rich console output."""

    console = Console(record=True, theme=Theme({}), width=100)
    _render_rich_report(console, report, use_sign_symbols=False)
    text = console.export_text()
    return "```\n" + text.rstrip() + "\n```"


def export_rich_html(path: str | Path, report: ChartReport) -> None:
    """
    Export the rich report to an HTML file with a dark theme.
    """
    # Use a neutral theme; we'll inject our own dark background CSS.
    console = Console(record=True, theme=Theme({}), width=100)
    # Avoid sign symbols in HTML export so all glyphs share a fixed width.
    _render_rich_report(console, report, use_sign_symbols=False)
    html = console.export_html(inline_styles=True)
    dark_css = """
<style>
html, body { background:#0b0b0b !important; color:#eaeaea !important; }
pre, code {
  background:#0b0b0b !important;
  color:#eaeaea !important;
  white-space: pre;
  font-family:'Noto Sans Mono','DejaVu Sans Mono','JetBrains Mono','Fira Code','Menlo','Consolas','Courier New',monospace;
  font-variant-ligatures: none;
}
pre code span { white-space: pre; font-family: inherit; }
</style>
""".strip()
    if "</head>" in html:
        html = html.replace("</head>", f"{dark_css}\n</head>", 1)
    else:
        html = f"{dark_css}\n{html}"
    Path(path).write_text(html, encoding="utf-8")


def _render_rich_report(console: Console, report: ChartReport, use_sign_symbols: bool = True) -> None:
    """Shared rich rendering so we can also export to HTML."""

    header_lines = _chart_header_lines(report)
    console.print(f"[bold cyan]{header_lines[0]}[/]")
    for line in header_lines[1:]:
        console.print(line)
    console.print()

    body_table = Table(title="Bodies", box=box.ROUNDED, expand=False, padding=(0, 1))
    body_table.add_column("Body", style="cyan", no_wrap=True)
    body_table.add_column("Position", style="magenta", no_wrap=True, justify="right")
    body_table.add_column("Longitude", justify="right", no_wrap=True)
    body_table.add_column("Latitude", justify="right", no_wrap=True)
    body_table.add_column("Speed", justify="right", no_wrap=True)

    for body in report.bodies:
        pos = report.positions[body.name]
        sign = SIGN_SYMBOLS[pos.sign_name] if use_sign_symbols else pos.sign
        position = f"{pos.degree:02d}°{pos.minute:02d}' {sign}"
        speed = f"{body.speed_longitude:+.4f}"
        if body.retrograde:
            speed = f"[red]{speed} R[/]"
        label = f"{body.symbol} {body.name.capitalize()}" if use_sign_symbols else body.name.capitalize()
        body_table.add_row(label, position, f"{body.longitude:.4f}", f"{body.latitude:+.4f}", speed)
    console.print(body_table)

    aspect_table = Table(title="Harmonic Aspects", box=box.ROUNDED, expand=False, padding=(0, 1))
    aspect_table.add_column("Pair", style="cyan", no_wrap=True)
    aspect_table.add_column("Harmonic", justify="right")
    aspect_table.add_column("Aspect", style="green")
    aspect_table.add_column("Angle", justify="right")
    aspect_table.add_column("Residual", justify="right", style="yellow")
    for first, second in report.matched:
        pair_label = f"{first.name.capitalize()} - {second.name.capitalize()}"
        for match in report.aspects[(first, second)]:
            aspect_table.add_row(
                pair_label, str(match.harmonic), match.name, f"{match.angle:.2f}°", f"{match.residual:.2f}°"
            )
            pair_label = ""
    if not report.matched:
        aspect_table.add_row("none", "", "", "", "")
    console.print(aspect_table)

    if report.houses is not None:
        house_table = Table(title="Houses", box=box.MINIMAL, expand=False, padding=(0, 1))
        house_table.add_column("Cusp", justify="right")
        house_table.add_column("Longitude", justify="right")
        for line in _houses_lines(report.houses):
            label, value = line.split(":", 1)
            house_table.add_row(label.strip(), value.strip())
        console.print(house_table)
