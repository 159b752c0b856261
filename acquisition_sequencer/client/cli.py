"""
Command line acquisition planner.

Loads a YAML acquisition plan, prints the events it expands to and can write
the TileConfiguration.txt of its stage positions for later stitching.

    acq-events plan.yml --limit 20
    acq-events plan.yml --json --tileconfig ./output --pixel-size 0.65
"""

import argparse
import itertools
import json
import logging
import sys
import time
from typing import List, Optional

from acquisition_sequencer.acquisition.tiles import TileConfigUtils
from acquisition_sequencer.config.loader import load_plan
from acquisition_sequencer.errors import AcquisitionSequencerError

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acq-events", description="Expand an acquisition plan into acquisition events"
    )
    parser.add_argument("plan", help="Path to the YAML acquisition plan")
    parser.add_argument("-n", "--limit", type=_non_negative_int, default=None, help="Print at most N events")
    parser.add_argument("--json", action="store_true", help="Print one JSON object per event")
    parser.add_argument(
        "--tileconfig", metavar="DIR", default=None, help="Write TileConfiguration.txt for the plan's positions"
    )
    parser.add_argument(
        "--pixel-size", type=float, default=1.0, help="Pixel size in micrometers for TileConfiguration.txt"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    start_time = time.perf_counter()
    try:
        plan = load_plan(args.plan)
        pipeline = plan.build_pipeline()
        logger.info(f"Axes (outermost first): {', '.join(pipeline.axis_names) or 'none'}")

        count = 0
        for event in itertools.islice(pipeline.events(), args.limit):
            print(json.dumps(event.to_dict()) if args.json else repr(event))
            count += 1

        if args.tileconfig is not None:
            xy_positions = plan.xy_positions()
            if xy_positions is None:
                logger.warning("Plan has no stage positions, TileConfiguration.txt not written")
            else:
                TileConfigUtils.write_tileconfig(
                    args.tileconfig, xy_positions, pixel_size_um=args.pixel_size
                )
    except (FileNotFoundError, AcquisitionSequencerError) as e:
        logger.error(f"Planning failed: {e}")
        return 1

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(f"Planned {count} events in {elapsed_ms:.1f}ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
