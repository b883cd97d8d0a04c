#!/usr/bin/env python3
# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Command-line interface for CompositeClock.
Runs one edit session against a clock and prints the result.
"""

import argparse
import logging
import math
import sys
from typing import List, Optional, Tuple

from .controller import CompositeClock
from .faces.digital import is_valid_time_text, text_to_timestamp
from .time_state import now_ms, to_datetime

logger = logging.getLogger(__name__)


def parse_point(text: str) -> Tuple[float, float]:
    """Parse an 'X,Y' pointer offset (y up) as used by the drag command."""
    try:
        x, y = (float(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected X,Y but got {text!r}")
    return x, y


def make_clock(args) -> CompositeClock:
    """Create a clock at the time selected by --timestamp or --at."""
    if args.timestamp is not None:
        timestamp = args.timestamp
    elif args.at:
        if not is_valid_time_text(args.at):
            print(f"Error: --at must be HH:MM:SS, got {args.at!r}")
            sys.exit(1)
        timestamp = text_to_timestamp(args.at, now_ms())
    else:
        timestamp = now_ms()
    return CompositeClock(timestamp=timestamp)


def print_clock(clock: CompositeClock) -> None:
    """Print both faces of a clock."""
    angles = clock.display_angles
    print(f"Time:    {clock.display_text}")
    print(f"Date:    {to_datetime(clock.timestamp):%Y-%m-%d}")
    print(f"Hour:    {math.degrees(angles.hour):6.1f}°")
    print(f"Minute:  {math.degrees(angles.minute):6.1f}°")
    print(f"Second:  {math.degrees(angles.second):6.1f}°")


def cmd_show(args, clock: CompositeClock) -> int:
    """Show the clock faces."""
    print_clock(clock)
    return 0


def cmd_set(args, clock: CompositeClock) -> int:
    """Edit the digital face."""
    clock.enter_edit_mode("digital")
    clock.update_digital_buffer(args.text)
    valid = clock.digital.is_text_valid
    clock.exit_edit_mode("digital", submit=not args.cancel)

    if args.cancel:
        print("Edit cancelled")
    elif not valid:
        print(f"Invalid time {args.text!r} (expected HH:MM:SS), clock unchanged")
    print_clock(clock)
    return 0 if valid or args.cancel else 1


def cmd_drag(args, clock: CompositeClock) -> int:
    """Drag the analogue minute hand through a series of points."""
    clock.enter_edit_mode("analogue")
    for x, y in args.points:
        if x == 0 and y == 0:
            logger.warning("Skipping pointer at face center")
            continue
        clock.analogue.track_pointer(x, y)
        angles = clock.analogue.buffer
        logger.debug(f"Pointer ({x}, {y}) -> minute {math.degrees(angles.minute):.1f}°, "
                     f"hour {math.degrees(angles.hour):.1f}°")
    clock.exit_edit_mode("analogue", submit=not args.cancel)

    if args.cancel:
        print("Edit cancelled")
    print_clock(clock)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CompositeClock - edit a clock from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  compositeclock-cli show                      Show the current time on both faces
  compositeclock-cli --at 13:05:00 set 14:30:00
                                               Edit the digital face
  compositeclock-cli --at 13:05:00 drag --point=0,1 --point=1,1 --point=1,0
                                               Drag the minute hand to quarter past
        """
    )

    parser.add_argument("--timestamp", type=int, help="Start at this timestamp (ms)")
    parser.add_argument("--at", help="Start at this time today (HH:MM:SS)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("show", help="Show both faces")

    set_parser = subparsers.add_parser("set", help="Edit the digital face")
    set_parser.add_argument("text", help="New time (HH:MM:SS)")
    set_parser.add_argument("--cancel", action="store_true", help="Leave edit mode without submitting")

    drag_parser = subparsers.add_parser("drag", help="Drag the analogue minute hand")
    drag_parser.add_argument("-p", "--point", dest="points", action="append", required=True,
                             type=parse_point, metavar="X,Y",
                             help="Pointer offset from the face center, y up. Repeat for each "
                                  "sample; write negative values as --point=-1,0")
    drag_parser.add_argument("--cancel", action="store_true", help="Leave edit mode without submitting")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "show": cmd_show,
        "set": cmd_set,
        "drag": cmd_drag,
    }

    clock = make_clock(args)
    try:
        return commands[args.command](args, clock)
    finally:
        clock.dispose()


if __name__ == "__main__":
    sys.exit(main())
