import argparse
import logging
import os
import sys
from typing import List, Optional

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from bw_colorization.config import OracleConfig, PipelineConfig
from bw_colorization.errors import ColorizationError
from bw_colorization.pipeline import ColorizationPipeline
from bw_colorization.utils.io import load_bitmap, save_bitmap


def _output_path(outdir: str, source: str) -> str:
    name = os.path.splitext(os.path.basename(source))[0]
    return os.path.join(outdir, f"{name}_colorized.png")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Colorize grayscale photographs.")
    parser.add_argument("inputs", nargs="+", help="Grayscale input image paths")
    parser.add_argument("--outdir", default="outputs/colorized", help="Output directory")
    parser.add_argument("--model", required=True, help="TorchScript colorization model")
    parser.add_argument("--device", default="cpu")
    parser.add_argument("--input-size", type=int, default=512)
    parser.add_argument(
        "--interpolation", default="area", choices=["area", "bilinear", "cubic"]
    )
    parser.add_argument(
        "--working-width",
        type=int,
        default=None,
        help="Rescale inputs to this width before colorizing",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = PipelineConfig(
        model_input_size=args.input_size,
        resize_interpolation=args.interpolation,
        working_width=args.working_width,
        oracle=OracleConfig(
            model_path=args.model,
            device=args.device,
        ),
    )
    pipeline = ColorizationPipeline.from_config(config)

    failures = 0
    for path in args.inputs:
        try:
            outputs = pipeline(load_bitmap(path))
        except ColorizationError as exc:
            failures += 1
            print(f"[{exc.kind}] {path}: {exc}", file=sys.stderr)
            continue
        out_path = _output_path(args.outdir, path)
        try:
            save_bitmap(out_path, outputs.colorized)
        except OSError as exc:
            failures += 1
            print(f"[OSError] {out_path}: {exc}", file=sys.stderr)
            continue
        print(f"colorized image saved to {out_path}")

    print(f"Done. {len(args.inputs) - failures}/{len(args.inputs)} images colorized.")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
