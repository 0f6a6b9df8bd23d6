# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Console logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOG_FORMAT = "%(message)s"


def setup_rich_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route all build-load log records through a rich handler.

    Args:
        verbose: Log DEBUG records (polling progress, created/deleted resources)
        console: Console to write to, defaults to stderr
    """
    level = logging.DEBUG if verbose else logging.INFO
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger("buildload")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    # The Kubernetes client is chatty on DEBUG, keep it at WARNING
    logging.getLogger("kubernetes").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
