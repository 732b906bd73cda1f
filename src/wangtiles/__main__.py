"""
Main entry point for wangtiles.
Usage: python -m wangtiles PATH [PATH ...] [--resolve WANGSET NE,SE,SW,NW] [--frame TILE_ID ELAPSED_MS]
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .settings import AppSettings, ConfigError
from .tilesets import TilesetService
from .tilesets.errors import TilesetError
from .tilesets.models import CornerSignature
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wangtiles",
        description="Load Wang tilesets, resolve corner signatures and query animation frames.",
    )
    parser.add_argument("paths", nargs="*", type=Path, help="Tileset files or directories")
    parser.add_argument(
        "--resolve",
        nargs=2,
        metavar=("WANGSET", "NE,SE,SW,NW"),
        help="Resolve a corner signature (0 = any) in the first loaded tileset",
    )
    parser.add_argument(
        "--frame",
        nargs=2,
        type=int,
        metavar=("TILE_ID", "ELAPSED_MS"),
        help="Print the frame shown by a tile at the given elapsed time",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --resolve")
    parser.add_argument("--profile", default="default", help="Settings profile name")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_signature(text: str) -> CornerSignature:
    values = [int(v) for v in text.split(",")]
    if len(values) != 4:
        raise ValueError(f"expected 4 comma separated corners, got {text!r}")
    return CornerSignature(*values)


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")

    # Load configuration first
    try:
        settings = AppSettings(profile=args.profile)
    except ConfigError as e:
        print(f"wangtiles: {e}", file=sys.stderr)
        return 1
    setup_logging(settings)

    logger.info(f"Starting wangtiles {__version__}")
    logger.info(f"Configuration loaded from {settings.get_settings_file_path()}")

    # Validate settings on startup
    validation = settings.validate()
    if validation.warnings:
        logger.warning("Configuration warnings detected:")
        for warning in validation.warnings:
            logger.warning(f"  {warning}")

    if not validation.is_valid:
        logger.error("Configuration validation failed:")
        for error in validation.errors:
            logger.error(f"  {error}")
        return 1

    service = TilesetService(settings)
    loaded: List[str] = []
    try:
        if not args.paths:
            loaded.extend(ts.name for ts in service.load_directory())
        for path in args.paths:
            if path.is_dir():
                loaded.extend(ts.name for ts in service.load_directory(path))
            else:
                loaded.append(service.load(path).name)
    except (TilesetError, ValueError) as e:
        logger.error(f"Failed to load tilesets: {e}")
        return 1

    for name in loaded:
        tileset = service.get_tileset(name)
        print(
            f"{tileset.name}: {tileset.tile_count} tiles, "
            f"wang sets {service.resolver(name).wang_set_names}, "
            f"{len(tileset.animations)} animated, "
            f"{len(tileset.collision_shapes)} with collision"
        )

    if not loaded:
        logger.warning("No tilesets loaded")
        return 0 if args.resolve is None and args.frame is None else 1

    target = loaded[0]
    try:
        if args.resolve:
            wang_set, corners = args.resolve
            seed = args.seed if args.seed is not None else settings.resolver.random_seed
            tile_id = service.resolve(target, wang_set, parse_signature(corners), random.Random(seed))
            print(f"resolve {wang_set} {corners} -> {tile_id}")
        if args.frame:
            tile_id, elapsed_ms = args.frame
            print(f"frame {tile_id} @ {elapsed_ms} ms -> {service.current_frame(target, tile_id, elapsed_ms)}")
    except (TilesetError, ValueError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
