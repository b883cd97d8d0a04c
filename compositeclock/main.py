#!/usr/bin/env python3
# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
CompositeClock - Main Application.
Runs a ticking clock and prints its faces to the console whenever they change.
"""

import argparse
import logging
import math
import os
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

# Initialize logging early
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)
logger = logging.getLogger(__name__)


def setup_file_logging(log_dir: str) -> None:
    """Set up file logging in addition to console."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path / 'compositeclock.log')
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logging.getLogger().addHandler(file_handler)


def format_angle(angle: float, units: str = "degrees") -> str:
    """Format a hand angle for console output."""
    if units == "radians":
        return f"{angle:.3f}rad"
    return f"{math.degrees(angle):6.1f}°"


class CompositeClockApp:
    """Console CompositeClock application."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        verbose: bool = False,
        install_signal_handlers: bool = True
    ):
        """
        Initialize the application.

        Args:
            config_path: Path to configuration file.
            verbose: Log at DEBUG regardless of the configured level.
            install_signal_handlers: Stop cleanly on SIGINT/SIGTERM.
        """
        self.config_path = config_path
        self.verbose = verbose
        self.config = None
        self.clock = None
        self._unsubscribe = None

        self._shutdown_event = threading.Event()

        if install_signal_handlers:
            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.stop()

    def _load_config(self) -> bool:
        """Load configuration."""
        from .config import load_config, validate_config

        try:
            self.config = load_config(self.config_path)

            errors = validate_config(self.config)
            if errors:
                for error in errors:
                    logger.error(f"Config error: {error}")
                return False

            level = logging.DEBUG if self.verbose else self.config.logging.level.upper()
            logging.getLogger().setLevel(level)
            logger.info(f"Configuration loaded from: {self.config.config_path or 'defaults'}")
            return True

        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            return False

    def _init_clock(self) -> bool:
        """Create the clock and attach the console view."""
        from .controller import CompositeClock
        from .time_state import TIME_CELL

        try:
            self.clock = CompositeClock.from_config(self.config)
            self._unsubscribe = self.clock.store.watch(
                TIME_CELL,
                lambda state: state.timestamp // 1000,
                lambda seconds, previous: self.render()
            )
            return True

        except Exception as e:
            logger.error(f"Failed to initialize clock: {e}")
            return False

    def render_line(self) -> str:
        """Build the console line for the current clock state."""
        line = self.clock.digital.text
        if self.config.display.show_angles:
            angles = self.clock.analogue.angles
            units = self.config.display.angle_units
            line += (f"  hour {format_angle(angles.hour, units)}"
                     f"  minute {format_angle(angles.minute, units)}"
                     f"  second {format_angle(angles.second, units)}")
        return line

    def render(self) -> None:
        print(self.render_line(), flush=True)

    def run(self, seconds: Optional[float] = None) -> int:
        """
        Run the clock until stopped.

        Args:
            seconds: Stop automatically after this many seconds.

        Returns:
            Exit code (0 for success).
        """
        logger.info("Starting CompositeClock...")

        if not self._load_config():
            return 1

        log_dir = self.config.logging.directory or os.environ.get('COMPOSITECLOCK_LOG_DIR')
        if log_dir:
            try:
                setup_file_logging(log_dir)
            except Exception as e:
                logger.warning(f"Could not set up file logging: {e}")

        if not self._init_clock():
            return 1

        try:
            self.render()
            self.clock.start()
            self._shutdown_event.wait(seconds)
        except Exception as e:
            logger.error(f"Main loop error: {e}")
            return 1
        finally:
            self._cleanup()

        return 0

    def stop(self) -> None:
        """Stop the application."""
        logger.info("Stopping CompositeClock...")
        self._shutdown_event.set()

    def _cleanup(self) -> None:
        """Clean up resources."""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

        if self.clock:
            try:
                self.clock.dispose()
            except Exception as e:
                logger.error(f"Error disposing clock: {e}")

        logger.info("CompositeClock stopped")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="CompositeClock - analogue and digital clock on one time value",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '-c', '--config',
        help='Path to configuration file'
    )

    parser.add_argument(
        '-s', '--seconds',
        type=float,
        help='Stop after this many seconds'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--version',
        action='store_true',
        help='Show version and exit'
    )

    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"CompositeClock {__version__}")
        return 0

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    app = CompositeClockApp(config_path=args.config, verbose=args.verbose)
    return app.run(seconds=args.seconds)


if __name__ == "__main__":
    sys.exit(main())
