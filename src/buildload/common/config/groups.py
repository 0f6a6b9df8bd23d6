# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from cyclopts import Group


class Groups:
    """Help panels of the command line, in display order."""

    NAMING = Group.create_ordered("Naming")
    BUILD = Group.create_ordered("Build")
    SOURCE = Group.create_ordered("Source")
    OUTPUT = Group.create_ordered("Output")
    SERIES = Group.create_ordered("Series")
    REPORTS = Group.create_ordered("Reports")
