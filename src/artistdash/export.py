"""CLI entry point: write every chart (streamgraph included) as SVG or PNG files.

    uv run artistdash-export --data "data/spotify_data clean.csv" --png
"""

import argparse
import sys
from functools import partial
from pathlib import Path

import numpy as np

from artistdash.charts.registry import all_pipelines
from artistdash.config import configure_logging, load_settings
from artistdash.loader import load_records
from artistdash.models import ViewportSize
from artistdash.render_trigger import ChartView, RenderState
from artistdash.renderers.static import save_static_chart
from artistdash.renderers.svg import SvgSurface

_ROOT = Path(__file__).parent.parent.parent


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="artistdash-export", description=__doc__)
    parser.add_argument("--data", type=Path, help="CSV file (default: ARTISTDASH_DATA_PATH)")
    parser.add_argument("--out", type=Path, default=_ROOT / "results", help="Output directory")
    parser.add_argument("--width", type=float, default=960)
    parser.add_argument("--height", type=float, default=480)
    parser.add_argument("--png", action="store_true", help="Write PNG instead of SVG")
    parser.add_argument("--seed", type=int, help="Seed for scatter jitter")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)

    data_path = args.data or settings.data_path
    size = ViewportSize(args.width, args.height)
    rng = np.random.default_rng(args.seed) if args.seed is not None else None

    status = 0
    for pipeline in all_pipelines(settings, rng=rng):
        view = ChartView(pipeline, SvgSurface(pipeline.surface_id), partial(load_records, data_path))
        if not view.load():
            status = 1
            continue
        # No resize stream here: apply the one known size directly
        view.set_size(size)
        if view.state is not RenderState.READY:
            print(f"Skipped {pipeline.name}: nothing to draw")
            continue

        if args.png:
            path = save_static_chart(view.geometry, pipeline.name, args.out / f"{pipeline.name}.png")
        else:
            path = args.out / f"{pipeline.name}.svg"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(view.target.to_svg(), encoding="utf-8")
        print(f"Saved: {path}")
    return status


if __name__ == "__main__":
    sys.exit(main())
