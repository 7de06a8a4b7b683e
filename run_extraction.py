#!/usr/bin/env python3
"""
Top-level entry point for Lua doc-comment extraction.

Walks a Lua project, parses every EmmyLua doc comment and writes the results
as JSONL (one doc block per line) plus the project's module tree as JSON.

Usage:
    python run_extraction.py --source-dir /path/to/lua/project
    python run_extraction.py --source-dir ./src --output-file out/blocks.jsonl
    python run_extraction.py --config luadoc.yml --log-level debug
"""

import argparse
import json
import logging
import os
import sys
import time
from typing import List, Optional

from core.project_config import ConfigValidationError, ProjectConfig, load_project_config
from core.run_artifacts import write_run_report
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="EmmyLua doc-comment extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_extraction.py --source-dir ./src\n"
            "  python run_extraction.py --config luadoc.yml --log-level debug\n"
        ),
    )

    parser.add_argument(
        "--source-dir",
        help="Path to the Lua project directory. Required unless set in the config file.",
    )
    parser.add_argument(
        "--project-name",
        help="Name recorded on the module tree root. Default: directory name.",
    )
    parser.add_argument(
        "--output-file",
        help="Path for the doc-block JSONL file. Default: output/doc_blocks.jsonl",
    )
    parser.add_argument(
        "--module-tree-file",
        help="Path for the module tree JSON file. Default: output/modules.json",
    )
    parser.add_argument(
        "--no-module-tree",
        action="store_true",
        default=False,
        help="Skip building the module tree.",
    )
    parser.add_argument(
        "--exclude-dir",
        action="append",
        dest="exclude_dirs",
        help="Directory name to skip (repeatable).",
    )
    parser.add_argument(
        "--config",
        help="Optional YAML project config file.",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=None,
        help="Fail on invalid config instead of falling back to defaults.",
    )
    parser.add_argument(
        "--report-dir",
        default="output/run_reports",
        help="Directory for the JSON run report. Default: output/run_reports",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: INFO",
    )

    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> ProjectConfig:
    """Merge the config file (if any) with command-line overrides."""
    config = load_project_config(args.config, strict=args.strict_config)
    config = config.with_overrides(
        project_name=args.project_name,
        source_dir=args.source_dir,
        output_file=args.output_file,
        module_tree_file=args.module_tree_file,
        exclude_dirs=args.exclude_dirs,
        log_level=args.log_level,
    )
    if args.no_module_tree:
        config = config.with_overrides(module_tree_file="")
    return config


def phase1_extract(config: ProjectConfig):
    """Phase 1: Extract doc blocks and stream them to JSONL on disk.

    Returns:
        ExtractionStats for the run.

    Raises:
        FileNotFoundError: If the source directory does not exist.
    """
    from extraction.extractor import ExtractionStats, iter_extract_to_dict_list

    source_dir = config.source_dir
    if not os.path.isdir(source_dir):
        raise FileNotFoundError(f"Source directory not found: {source_dir}")

    logger.info("Source directory : %s", os.path.abspath(source_dir))
    logger.info("Output file      : %s", os.path.abspath(config.output_file))

    t0 = time.time()
    os.makedirs(os.path.dirname(os.path.abspath(config.output_file)), exist_ok=True)

    stats = ExtractionStats()
    exclude_dirs = config.exclude_dirs or None
    with open(config.output_file, "w", encoding="utf-8") as f:
        for block in iter_extract_to_dict_list(
            source_dir, exclude_dirs=exclude_dirs, stats=stats
        ):
            f.write(json.dumps(block, ensure_ascii=False) + "\n")

    logger.info(
        "Extraction completed in %.2fs: %d doc blocks written",
        time.time() - t0,
        stats.blocks_extracted,
    )
    return stats


def phase2_module_tree(config: ProjectConfig) -> None:
    """Phase 2: Build the module hierarchy and write it as JSON."""
    from extraction.extractor import build_module_tree

    module = build_module_tree(
        config.source_dir,
        exclude_dirs=config.exclude_dirs or None,
    )
    if config.project_name:
        module.name = config.project_name

    os.makedirs(os.path.dirname(os.path.abspath(config.module_tree_file)), exist_ok=True)
    with open(config.module_tree_file, "w", encoding="utf-8") as f:
        json.dump(module.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(
        "Wrote module tree (%d top-level modules) to %s",
        len(module.modules),
        config.module_tree_file,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)
    configure_structured_logging(args.log_level or logging.INFO)
    run_id = set_run_id()

    try:
        config = resolve_config(args)
        configure_structured_logging(config.log_level)
        if not config.source_dir:
            raise ConfigValidationError("No source directory given (--source-dir or config)")

        with phase_scope("extract"):
            stats = phase1_extract(config)

        if config.module_tree_file:
            with phase_scope("module_tree"):
                phase2_module_tree(config)

        report_path = write_run_report(
            stats=stats.to_dict(),
            run_id=run_id,
            source_dir=config.source_dir,
            output_dir=args.report_dir,
        )
        logger.info("Run report written to %s", report_path)
        return 0

    except FileNotFoundError as e:
        logger.error("File error: %s", e)
        return 1
    except ConfigValidationError as e:
        logger.error("Config error: %s", e)
        return 1
    except Exception as e:
        logger.error("Extraction failed: %s", e, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
