#!/usr/bin/env python3
"""
Main entry point for the antinuclei-in-jets analysis.

Reads collisions from a ROOT tree, runs every enabled execution mode
(data, qc, efficiency, jets_mc_gen, jets_mc_rec, systematics_data,
systematics_efficiency) and writes one ROOT directory of histograms per
mode into a timestamped run directory.
"""

import sys
import logging
import argparse
import yaml

from domain.config import AnalysisConfig
from pipeline.executor import AnalysisExecutor
from services.parsing import EventReader
from utils.paths import create_timestamped_run_dir, prepare_run_dir


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file; an empty file gives an empty dict."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def apply_cli_overrides(config_dict: dict, args) -> dict:
    """Inject CLI values into the config dict (override YAML values)."""
    updated = dict(config_dict)
    if args.input is not None:
        updated["input"] = {**(updated.get("input") or {}), "path": args.input}
    if args.max_events is not None:
        updated["input"] = {**(updated.get("input") or {}), "max_events": args.max_events}
    if args.seed is not None:
        updated["event_selection"] = {**(updated.get("event_selection") or {}), "random_seed": args.seed}
    return updated


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Antinuclei in jets - per-event jet and underlying-event analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the modes enabled in config.yaml
  python main.py --input AO2D_flat.root

  # Reproducible run on the first 1000 events
  python main.py --input AO2D_flat.root --max-events 1000 --seed 42

  # Write into an existing directory
  python main.py --input AO2D_flat.root --run-dir /data/runs/antinuclei_test

  # Dry-run to validate config
  python main.py --dry-run
        """
    )

    parser.add_argument(
        "--config", type=str, default="config.yaml",
        help="Path to configuration file (default: config.yaml)"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Validate configuration without running the analysis"
    )

    input_group = parser.add_argument_group("Input Options")
    input_group.add_argument(
        "--input", type=str, default=None,
        help="ROOT file with the events tree (overrides input.path)"
    )
    input_group.add_argument(
        "--max-events", type=int, default=None,
        help="Stop after this many events (overrides input.max_events)"
    )
    input_group.add_argument(
        "--seed", type=int, default=None,
        help="Seed of the random source (overrides event_selection.random_seed)"
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--run-dir", type=str, default=None,
        help="Pre-created run directory (skips timestamped dir creation)"
    )

    args = parser.parse_args(argv)

    if args.max_events is not None and args.max_events < 0:
        parser.error("--max-events must be non-negative")

    return args


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Antinuclei in jets")
    logger.info("=" * 60)

    try:
        logger.info(f"Loading configuration from: {args.config}")
        config_dict = apply_cli_overrides(load_config(args.config), args)
        config = AnalysisConfig.from_dict(config_dict)
        logger.info("Configuration loaded and validated successfully")

        if args.dry_run:
            logger.info("Dry run mode - configuration is valid, exiting")
            logger.info(f"Enabled modes: {config.modes.enabled_modes()}")
            return 0

        if not config.input.path:
            logger.error("No input file: set input.path or pass --input")
            return 1

        # Determine run directory
        if args.run_dir:
            run_dir = args.run_dir
            prepare_run_dir(run_dir)
            logger.info(f"Using run directory: {run_dir}")
        else:
            run_dir = create_timestamped_run_dir(config.output.base_output_dir, config.output.run_name)
            logger.info(f"Created timestamped run directory: {run_dir}")

        reader = EventReader(config.input.path, tree_name=config.input.tree_name)
        total = reader.num_entries()
        if config.input.max_events is not None:
            total = min(total, config.input.max_events)

        executor = AnalysisExecutor(config)
        stats = executor.run(reader.iter_collisions(config.input.max_events), total=total)
        executor.write_output(run_dir, stats)

        if stats.has_failures:
            logger.warning(f"Analysis finished with failed events, output in {run_dir}")
        else:
            logger.info(f"✓ Analysis completed successfully, output in {run_dir}")
        return 0

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
