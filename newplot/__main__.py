"""Command line entry point: ``python -m newplot build|gadget FILE ...``."""

from __future__ import annotations

import argparse
import logging
import sys

from newplot.chart import PLOT_TYPES, THEME_STYLES
from newplot.config import GadgetConfig
from newplot.core import new_plot
from newplot.errors import NewPlotError
from newplot.gadget import launch
from newplot.loaders import read_table_path
from newplot.render import save_figure

logger = logging.getLogger("newplot")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="newplot", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build a chart from a data file.")
    build.add_argument("file")
    build.add_argument("--sheet", default=None)
    build.add_argument("--x", required=True)
    build.add_argument("--y", required=True)
    build.add_argument("--group", default=None)
    build.add_argument("--type", default="point", help=f"One of {', '.join(PLOT_TYPES)}.")
    build.add_argument("--palette", default=None)
    build.add_argument(
        "--theme-style", default="minimal", help=f"One of {', '.join(THEME_STYLES)}."
    )
    build.add_argument("--title", default=None)
    build.add_argument("--subtitle", default=None)
    build.add_argument("--caption", default=None)
    build.add_argument("-o", "--output", default=None, help="Write the figure (.html or .json).")
    build.add_argument("--print-code", action="store_true", help="Print the equivalent call.")

    gadget = sub.add_parser("gadget", help="Open the interactive builder on a data file.")
    gadget.add_argument("file")
    gadget.add_argument("--sheet", default=None)
    gadget.add_argument("--port", type=int, default=None)
    gadget.add_argument("--headless", action="store_true")
    return parser


def _run_build(args: argparse.Namespace) -> int:
    df = read_table_path(args.file, sheet=args.sheet)
    chart = new_plot(
        df,
        x=args.x,
        y=args.y,
        group=args.group,
        type=args.type,
        palette=args.palette,
        theme_style=args.theme_style,
        title=args.title,
        subtitle=args.subtitle,
        caption=args.caption,
    )
    if args.output:
        save_figure(chart, args.output)
    if args.print_code or not args.output:
        print(chart.request.to_call())
    return 0


def _run_gadget(args: argparse.Namespace) -> int:
    df = read_table_path(args.file, sheet=args.sheet)
    result = launch(df, config=GadgetConfig(port=args.port, headless=args.headless))
    if result is None:
        logger.info("Cancelled")
        return 1
    print(result.source_text)
    return 0


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        if args.command == "build":
            return _run_build(args)
        return _run_gadget(args)
    except NewPlotError as e:
        logger.error("%s", e)
        return 1
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Could not process %s: %s", args.file, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
