"""
Command-line entrypoint.

Usage:
    chronoviz bank --data gapminder.csv --x year --y life_exp --where "country=South Africa"
    chronoviz chart --data gapminder.csv --x year --y life_exp --color country \
        --highlight "South Africa" --highlight Rwanda --out life_exp.html
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
from typing import Any

from .bank.advisor import AspectRatioAdvisor
from .core.constants import BANKING_METHODS
from .core.errors import ChronovizError
from .core.logs import configure_logging
from .io.config import ChronovizSettings
from .io.read import parse_where, read_table
from .viz.distributions import boxplot_by_period, quantile_band_chart
from .viz.events import event_timeline
from .viz.layout import bank_frame
from .viz.save import save_chart
from .viz.timeseries import banked_line_chart, highlight_lines, small_multiples, with_smoother

CHART_KINDS = ("line", "band", "box", "multiples", "events")


def _parse_bound(text: str | None) -> Any:
    """Parse an x-range bound: number first, then ISO date/datetime."""
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        pass
    try:
        if "T" in text or " " in text:
            return dt.datetime.fromisoformat(text)
        return dt.date.fromisoformat(text)
    except ValueError as e:
        raise ChronovizError(f"cannot parse x bound {text!r} as a number or ISO date") from e


def _common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data", type=str, required=True, help="CSV/TSV/Parquet table.")
    p.add_argument("--x", type=str, required=True, help="Time column.")
    p.add_argument(
        "--where",
        action="append",
        default=[],
        metavar="COL=VALUE",
        help="Equality filter applied before banking (repeatable).",
    )
    p.add_argument("--angle", type=float, default=None, help="Target mean angle in degrees.")
    p.add_argument("--method", choices=BANKING_METHODS, default=None, help="Banking method.")
    p.add_argument("--width", type=int, default=None, help="Plot width in pixels.")
    p.add_argument("--config", type=str, default=None, help="Explicit TOML settings file.")
    p.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")


def _setup(args: argparse.Namespace) -> tuple[ChronovizSettings, AspectRatioAdvisor]:
    settings = ChronovizSettings.load(args.config)
    configure_logging("DEBUG" if args.verbose else settings.log_level)
    advisor = AspectRatioAdvisor.from_settings(
        settings, target_angle=args.angle, method=args.method
    )
    return settings, advisor


def _cmd_bank(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="chronoviz bank",
        description="Compute the aspect ratio that banks a series to the target angle.",
    )
    _common_args(p)
    p.add_argument("--y", type=str, required=True, help="Value column.")
    p.add_argument("--group", type=str, default=None, help="Entity column; groups share one ratio.")
    p.add_argument("--x-min", type=str, default=None, help="Lower x bound of the banked window.")
    p.add_argument("--x-max", type=str, default=None, help="Upper x bound of the banked window.")
    p.add_argument("--strict", action="store_true", help="Fail on all-flat series.")
    args = p.parse_args(argv)

    settings, advisor = _setup(args)
    df = read_table(args.data, where=parse_where(args.where))
    x_range = None
    if args.x_min is not None or args.x_max is not None:
        x_range = (_parse_bound(args.x_min), _parse_bound(args.x_max))
    width = args.width or settings.chart_width
    layout = bank_frame(
        df,
        args.x,
        args.y,
        group=args.group,
        advisor=advisor,
        x_range=x_range,
        width=width,
        min_height=settings.min_height,
        max_height=settings.max_height,
        strict=args.strict,
    )
    payload = layout.result.to_dict()
    payload.update({"width": layout.width, "height": layout.height})
    print(json.dumps(payload, indent=2))
    return 0


def _cmd_chart(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="chronoviz chart", description="Render a banked time-series chart to HTML or JSON."
    )
    _common_args(p)
    p.add_argument("--y", type=str, default=None, help="Value column (not used by events).")
    p.add_argument("--kind", choices=CHART_KINDS, default="line", help="Chart family.")
    p.add_argument("--color", type=str, default=None, help="Entity column (line) or facet column (multiples).")
    p.add_argument("--highlight", action="append", default=[], help="Entity to highlight (repeatable).")
    p.add_argument("--smooth", choices=("loess", "rolling"), default=None, help="Overlay a smoother.")
    p.add_argument("--end", type=str, default=None, help="Event end column (events).")
    p.add_argument("--label", type=str, default=None, help="Event label column (events).")
    p.add_argument("--size", type=str, default=None, help="Event magnitude column (events).")
    p.add_argument("--title", type=str, default=None, help="Chart title.")
    p.add_argument("--out", type=str, required=True, help="Output path (.html or .json).")
    args = p.parse_args(argv)

    settings, advisor = _setup(args)
    df = read_table(args.data, where=parse_where(args.where))
    width = args.width or settings.chart_width

    if args.kind == "events":
        if not args.end or not args.label:
            raise ChronovizError("--kind events requires --end and --label")
        chart = event_timeline(
            df, args.x, args.end, args.label, size=args.size, width=width, title=args.title
        )
    else:
        if not args.y:
            raise ChronovizError(f"--kind {args.kind} requires --y")
        if args.kind == "band":
            chart = quantile_band_chart(df, args.x, args.y, width=width, advisor=advisor, title=args.title)
        elif args.kind == "box":
            chart = boxplot_by_period(df, args.x, args.y, width=width, title=args.title)
        elif args.kind == "multiples":
            if not args.color:
                raise ChronovizError("--kind multiples requires --color (facet column)")
            chart = small_multiples(df, args.x, args.y, args.color, advisor=advisor, title=args.title)
        elif args.highlight:
            if not args.color:
                raise ChronovizError("--highlight requires --color (entity column)")
            chart = highlight_lines(
                df, args.x, args.y, args.color, args.highlight, width=width, advisor=advisor, title=args.title
            )
        else:
            chart = banked_line_chart(
                df, args.x, args.y, color=args.color, width=width, advisor=advisor, title=args.title
            )
        if args.smooth:
            if args.kind != "line":
                raise ChronovizError("--smooth is only supported with --kind line")
            chart = with_smoother(chart, df, args.x, args.y, method=args.smooth, group=args.color)

    path = save_chart(chart, args.out)
    print(f"[INFO] Wrote chart to {path}")
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="chronoviz", description="Time-series banking and chart utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("bank")
    sub.add_parser("chart")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    try:
        if cmd == "bank":
            code = _cmd_bank(rest)
        elif cmd == "chart":
            code = _cmd_chart(rest)
        else:
            print(f"Unknown command: {cmd}", file=sys.stderr)
            code = 2
    except (ChronovizError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()
