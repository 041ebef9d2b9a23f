"""
Long-form text enhancement with LLMs.

This script:
1. Reads a text or HTML file (novel chapter, article, news, documentation)
2. Detects its content type and composes the instructions for the selected
   feature (enhance, summarize, analyze, suggestions)
3. Sends it to the feature's model in one request, or in overlapping
   segments when it exceeds the model's input budget
4. Merges the segment results and writes them next to the input
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional, Sequence

from cli.argument_parser import setup_argparse
from cli.display import display_result, display_run_header
from cli.processing import run_enhancement
from modules import app_config as config
from modules.error_handler import handle_critical_error
from modules.logger import configure_verbosity, setup_file_handler, setup_logger
from modules.user_prompts import print_warning

logger = setup_logger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code (0 on success, 1 on failure)."""
    args = setup_argparse(argv)
    configure_verbosity(args.verbose)
    if args.log_file:
        setup_file_handler(None, args.log_file)
        logger.info(f"Logging to {args.log_file}")

    settings = config.get_feature_settings(args.feature)
    display_run_header(args.input, args.model or settings["model"], args.feature, args.log_file)
    result = asyncio.run(run_enhancement(args))
    display_result(result)

    return 0 if result.outcome.success else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Enhancement interrupted by user (Ctrl+C). Exiting.")
        print_warning("\nEnhancement interrupted by user.")
        sys.exit(130)
    except Exception as exc:
        handle_critical_error(
            exc,
            "main execution flow",
            exit_on_error=True,
            show_user_message=True,
        )
