from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path
from time import monotonic

_START_S = monotonic()

EXAMPLE_FILE_STEM = "example_pipeline"


def _log(message: str) -> None:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    print(f"[{stamp} +{monotonic() - _START_S:8.2f}s] {message}", flush=True)


def _format_pipeline_progress(details: dict) -> str:
    event = details.get("event")
    elapsed = f"{details.get('elapsed_s', 0.0):.3f}s"
    if event == "images_loaded":
        return (
            f"[hdtr] run: loaded {details.get('count', 0)} images "
            f"({details.get('width')}x{details.get('height')}) in {elapsed}"
        )
    if event == "masks_generated":
        return f"[hdtr] run: generated {details.get('count', 0)} masks mask_type={details.get('mask_type')} in {elapsed}"
    if event == "masks_normalized":
        return f"[hdtr] run: normalized masks in {elapsed}"
    if event == "masks_saved":
        return f"[hdtr] run: saved {len(details.get('outputs', []))} masks in {elapsed}"
    if event == "output_saved":
        return f"[hdtr] run: saved {details.get('output')} in {elapsed}"
    return f"[hdtr] run: {event} in {elapsed}"


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _next_example_path(directory: str | Path) -> Path:
    directory = Path(directory)
    num = 1
    while True:
        candidate = directory / f"{EXAMPLE_FILE_STEM}{num}.json"
        if not candidate.exists():
            return candidate
        num += 1


def cmd_run(args):
    from .pipeline import load_pipeline

    pipeline = load_pipeline(args.pipeline)
    _log(f"[hdtr] run: {len(pipeline.filenames)} inputs from {args.pipeline}")
    pipeline.execute(workers=args.workers, progress_callback=lambda d: _log(_format_pipeline_progress(d)))
    _log("[hdtr] run: complete")


def cmd_check(args):
    from .pipeline import load_pipeline

    load_pipeline(args.pipeline).validate()
    _log(
        "[hdtr] check: no problems found in pipeline. This does not guarantee success, "
        "images must still decode and share the same dimensions."
    )


def cmd_example(args):
    from .pipeline import save_example

    out = _next_example_path(args.dir)
    save_example(out, args.images or None)
    _log(f"[hdtr] example: created sample pipeline at {out}")


def build_parser():
    p = argparse.ArgumentParser(
        prog="hdtr",
        description="Composite equally sized images through per-pixel weight masks.",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("run", help="run a pipeline file and write the blended image")
    s.add_argument("pipeline")
    s.add_argument("--workers", type=_positive_int, default=None)
    s.set_defaults(func=cmd_run)

    s = sub.add_parser("check", help="validate a pipeline file without rendering")
    s.add_argument("pipeline")
    s.set_defaults(func=cmd_check)

    s = sub.add_parser("example", help="write a sample pipeline file")
    s.add_argument("images", nargs="*")
    s.add_argument("--dir", default=".")
    s.set_defaults(func=cmd_example)
    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except Exception as exc:
        print(f"[hdtr] error: {exc}", file=sys.stderr, flush=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
