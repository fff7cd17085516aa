# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions for pdfcjk."""

import logging
import sys

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configures logging for pdfcjk.

    Args:
        verbose: If True, DEBUG level is used.
        quiet: If True, only ERROR and higher are output.
            Takes precedence over verbose.

    Returns:
        Configured logger for pdfcjk.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    pdfcjk_logger = logging.getLogger("pdfcjk")
    pdfcjk_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    pdfcjk_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    pdfcjk_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return pdfcjk_logger
