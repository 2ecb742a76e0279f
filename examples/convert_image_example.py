#!/usr/bin/env python3
"""Convert an image through the Python API using the example RLE engine."""

from __future__ import annotations

import argparse
from pathlib import Path

from rle_engine_plugin import RunLengthEngine

from image_assemblifier import convert_image_file
from image_assemblifier.errors import AssemblifierError


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("image", type=Path)
    parser.add_argument("--columns", default="100")
    parser.add_argument("--output-dir", type=Path, default=Path.cwd())
    args = parser.parse_args()

    try:
        out = convert_image_file(
            args.image,
            args.output_dir,
            columns=args.columns,
            converter=RunLengthEngine(),
        )
    except AssemblifierError as exc:
        raise SystemExit(f"{type(exc).__name__}: {exc}") from exc
    print(f"Saved: {out}")


if __name__ == "__main__":
    main()
