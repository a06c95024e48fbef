"""CLI entrypoint for generating a funscript heatmap."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import load_config, resolve_output_dir
from .pipeline import HeatmapGenerator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render an interactive heatmap PNG and median speed for a funscript."
    )
    parser.add_argument("--input", required=True, help="Path to the .funscript file.")
    parser.add_argument(
        "--duration",
        required=True,
        type=float,
        help="Scene duration in seconds; actions at or past it are dropped.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Heatmap PNG path (default: <output_dir>/<input stem>.png from project config).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file (default: config/funscript_heatmap.yaml under the project root, if present).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(config_file=args.config)
    input_path = Path(args.input)
    if args.output is None:
        output_dir = resolve_output_dir(config=config)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{input_path.stem}.png"
    else:
        output_path = Path(args.output)

    generator = HeatmapGenerator.from_config(args.duration, config)
    result = generator.generate_file(input_path, output_path)
    summary = {
        "input_path": str(input_path),
        "heatmap_path": str(output_path),
        "interactive_speed": result.interactive_speed,
        "action_count": int(len(result.script.actions)),
    }
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
