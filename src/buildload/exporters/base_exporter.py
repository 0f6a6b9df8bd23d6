# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Base class for exporters that write stage timings or result sets to a file."""

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from pathlib import Path

from buildload.common.constants import MICROS_PER_MILLIS

logger = logging.getLogger(__name__)


def to_millis(value: timedelta | None) -> int | None:
    """Whole milliseconds of a duration, rounded down."""
    if value is None:
        return None
    return value // timedelta(microseconds=MICROS_PER_MILLIS)


class BaseExporter(ABC):
    """Writes generated content to <output_dir>/<file name>.

    Attributes:
        output_dir: Directory where the export file will be written
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    @abstractmethod
    def get_file_name(self) -> str:
        """Return the name of the export file."""

    @abstractmethod
    def _generate_content(self) -> str:
        """Return the content of the export file."""

    def export(self) -> Path:
        """Write the export file and return its path."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / self.get_file_name()
        path.write_text(self._generate_content(), encoding="utf-8")
        logger.debug(f"Exported {path}")
        return path
