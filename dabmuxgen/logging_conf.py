"""
Logging configuration helpers.

Deutsch:
    Logging-Konfiguration.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def configure_logging(default_level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Configure the root logger once.

    Log records go to stderr unless another stream is given, so configuration
    text written to stdout by the CLI stays clean.

    Deutsch:
        Setzt das Root-Logging einmalig auf (Ausgabe nach stderr), damit die
        auf stdout geschriebene Konfiguration nicht verunreinigt wird.
    """

    level_name = os.getenv("DABMUXGEN_LOGLEVEL", default_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=stream or sys.stderr)
