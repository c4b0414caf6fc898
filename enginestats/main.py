"""
EngineStats - Main Entry Point.

Samples CPU, GPU and memory telemetry from the local hardware tree once
per interval and prints a smoothed, one-line summary for each cycle.
"""

import argparse
import asyncio
import json
import logging
import logging.handlers
import signal
import sys
from pathlib import Path
from typing import Optional, TextIO

from .core.config import Config, ConfigError, LoggingConfig, get_default_config_path
from .core.aggregator import SnapshotAggregator
from .core.models import HardwareTree, Snapshot
from .collectors.local_collector import LocalCollector
from .collectors import nvidia_collector


logger = logging.getLogger(__name__)


def setup_logging(config: LoggingConfig, verbose: bool = False):
    """Configure root logging from the logging section of the config."""
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.INFO)
    # Snapshots go to stdout, so log records go to stderr
    logging.basicConfig(level=level, format=config.format, stream=sys.stderr)
    logging.getLogger().setLevel(level)

    if config.file_path:
        handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(handler)


class EngineStatsApplication:
    """
    Drives the sampling engine on a fixed schedule.

    - Builds the local hardware tree once at startup
    - Samples it once per interval, never overlapping cycles
    - Emits each snapshot as text or JSON
    """

    def __init__(
        self,
        config: Config,
        tree: Optional[HardwareTree] = None,
        stream: Optional[TextIO] = None,
    ):
        self.config = config
        if tree is None:
            collector = LocalCollector(
                collect_cpu=config.collection.collect_cpu,
                collect_gpu=config.collection.collect_gpu,
                collect_memory=config.collection.collect_memory,
            )
            tree = collector.build_tree()
        self.aggregator = SnapshotAggregator(tree)
        self.stream = stream if stream is not None else sys.stdout

        self._running = False
        self._sampling_task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    def render(self, snapshot: Snapshot) -> str:
        """Format a snapshot according to the display settings."""
        if self.config.display.output_format == "json":
            return json.dumps(snapshot.to_dict(), default=str)
        return snapshot.format(self.config.display.gpu_unavailable_text)

    def emit(self, snapshot: Snapshot):
        """Write a snapshot to the output stream."""
        print(self.render(snapshot), file=self.stream, flush=True)

    async def start(self, count: Optional[int] = None):
        """Start the sampling loop."""
        logger.info("Starting EngineStats...")
        logger.info(f"Sampling every {self.config.sampling.interval_seconds:.1f}s")
        self._running = True
        self._sampling_task = asyncio.create_task(self._sampling_loop(count))

    async def stop(self):
        """Stop the sampling loop."""
        if not self._running and self._sampling_task is None:
            return
        logger.info("Stopping EngineStats...")
        self._running = False

        task = self._sampling_task
        self._sampling_task = None
        if task and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        nvidia_collector.shutdown()
        logger.info(
            f"EngineStats stopped after {self.aggregator.cycles} cycles "
            f"({self.aggregator.failures} failed)"
        )

    async def wait(self):
        """Wait for the sampling loop to finish."""
        if self._sampling_task:
            try:
                await self._sampling_task
            except asyncio.CancelledError:
                pass

    async def _sampling_loop(self, count: Optional[int] = None):
        """Sample the hardware once per interval."""
        loop = asyncio.get_running_loop()
        interval = self.config.sampling.interval_seconds
        remaining = count

        while self._running:
            started = loop.time()
            try:
                self.emit(self.aggregator.sample())
            except Exception as e:
                logger.error(f"Sampling error: {e}")

            if remaining is not None:
                remaining -= 1
                if remaining <= 0:
                    self._running = False
                    break

            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, interval - elapsed))


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Smoothed CPU, GPU and RAM usage of the local machine"
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (YAML)"
    )

    parser.add_argument(
        "-i", "--interval",
        type=float,
        default=None,
        help="Seconds between samples (default: 1.0, minimum: 1.0)"
    )

    parser.add_argument(
        "-n", "--count",
        type=int,
        default=None,
        help="Stop after this many samples"
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Take a single sample and exit"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print snapshots as JSON"
    )

    parser.add_argument(
        "--no-gpu",
        action="store_true",
        help="Do not probe for GPUs"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate a sample configuration file"
    )

    return parser.parse_args(argv)


def load_config(args) -> Config:
    """Load configuration and apply command line overrides."""
    config_path = args.config or get_default_config_path()
    config = Config.from_yaml(config_path)

    if args.interval is not None:
        config.sampling.interval_seconds = args.interval
    if args.json:
        config.display.output_format = "json"
    if args.no_gpu:
        config.collection.collect_gpu = False

    config.validate()
    return config


async def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Generate sample config if requested
    if args.generate_config:
        config = Config()
        config_path = "config/config.yaml"
        Path("config").mkdir(exist_ok=True)
        config.to_yaml(config_path)
        print(f"Generated sample configuration: {config_path}")
        return 0

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(config.logging, verbose=args.verbose)

    count = 1 if args.once else args.count
    if count is not None and count < 1:
        print("--count must be at least 1", file=sys.stderr)
        return 2

    app = EngineStatsApplication(config)

    # Setup signal handlers
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(app.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            pass

    try:
        await app.start(count=count)
        await app.wait()
    finally:
        await app.stop()

    return 0


def run():
    """Entry point for the application."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nShutdown complete")


if __name__ == "__main__":
    run()
