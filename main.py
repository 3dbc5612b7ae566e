from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Sequence

from barchart import BarChart, Datum, chart_attributes_from_mapping, compute_axis_range
from barchart.axis import DEFAULT_TARGET_GRID_COUNT
from barchart.errors import ChartDataError


SAMPLE_DATA = tuple(Datum(i, f"d{i}") for i in range(1, 7))


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="barchart")
    sub = parser.add_subparsers(dest="command", required=True)

    axis = sub.add_parser("axis", help="Print the y-axis range and gridline values for a set of values.")
    axis.add_argument("values", nargs="*", type=float)
    axis.add_argument("--y-min", type=float, default=None)
    axis.add_argument("--y-max", type=float, default=None)
    axis.add_argument("--target-grid-count", type=float, default=DEFAULT_TARGET_GRID_COUNT)

    render = sub.add_parser("render", help="Render a bar chart to a PNG file.")
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--data", type=Path, default=None, help="CSV file with `label,value` rows (header optional).")
    render.add_argument(
        "--value",
        action="append",
        default=[],
        metavar="VALUE:LABEL",
        help="One bar; repeat for more. Ignored when --data is given.",
    )
    render.add_argument("--width", type=int, default=400)
    render.add_argument("--height", type=int, default=400)
    render.add_argument("--attributes", type=Path, default=None, help="JSON object of chart attribute overrides.")
    render.add_argument("--scroll", type=float, default=0.0, help="Horizontal scroll in px; negative moves later bars into view.")
    args = parser.parse_args(argv)

    if args.command == "axis":
        result = compute_axis_range(
            args.values,
            y_min=args.y_min,
            y_max=args.y_max,
            target_grid_count=args.target_grid_count,
        )
        payload = {
            "min_value": result.min_value,
            "max_value": result.max_value,
            "interval": result.interval,
            "grid_values": list(result.grid_values),
        }
        print(json.dumps(payload, indent=2, sort_keys=True))
        return

    if args.command == "render":
        if args.width <= 1 or args.height <= 1:
            raise ValueError("width and height must be > 1")
        if args.data is not None:
            data = _read_csv(args.data)
        elif args.value:
            data = tuple(_parse_value_arg(raw) for raw in args.value)
        else:
            data = SAMPLE_DATA
        overrides = {}
        if args.attributes is not None:
            overrides = json.loads(args.attributes.read_text(encoding="utf-8"))
            if not isinstance(overrides, dict):
                raise ChartDataError("attributes file must hold a JSON object")
        chart = BarChart(data=data, attributes=chart_attributes_from_mapping(overrides))
        if args.scroll:
            chart.layout(args.width, args.height)
            chart.scroll_by(args.scroll)
        out = chart.save_png(args.out, args.width, args.height)
        print(f"wrote {out}")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _parse_value_arg(raw: str) -> Datum:
    value, sep, label = raw.partition(":")
    if not sep or not label:
        raise ChartDataError(f"--value must use VALUE:LABEL format: {raw!r}")
    try:
        return Datum(float(value), label)
    except ValueError as exc:
        raise ChartDataError(f"--value has a non-numeric value: {raw!r}") from exc


def _read_csv(path: Path) -> tuple[Datum, ...]:
    out: list[Datum] = []
    with path.open(newline="", encoding="utf-8") as handle:
        for line_no, row in enumerate(csv.reader(handle), start=1):
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) != 2:
                raise ChartDataError(f"{path}:{line_no}: expected `label,value`")
            label, raw_value = row[0].strip(), row[1].strip()
            try:
                value = float(raw_value)
            except ValueError as exc:
                if line_no == 1:
                    continue
                raise ChartDataError(f"{path}:{line_no}: non-numeric value {raw_value!r}") from exc
            out.append(Datum(value, label))
    return tuple(out)


if __name__ == "__main__":
    main()
