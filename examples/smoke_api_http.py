#!/usr/bin/env python3
"""Smoke test a running HTTP server by uploading an image."""

from __future__ import annotations

import argparse
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("image", type=Path)
    parser.add_argument("--columns", default="80")
    parser.add_argument("--url", default="http://127.0.0.1:8090")
    parser.add_argument("--output", type=Path, default=Path("generated.s"))
    args = parser.parse_args()

    with httpx.Client(base_url=args.url, timeout=60.0) as client:
        client.get("/healthz").raise_for_status()
        response = client.post(
            "/v1/convert/upload",
            files={"image": (args.image.name, args.image.read_bytes())},
            data={"columns": args.columns},
        )
    if response.status_code != 200:
        raise SystemExit(f"{response.status_code}: {response.json().get('detail')}")
    args.output.write_bytes(response.content)
    print(f"Saved {args.output} ({response.headers.get('x-raster-size')})")


if __name__ == "__main__":
    main()
