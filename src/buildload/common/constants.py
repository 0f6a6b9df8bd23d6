# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

MICROS_PER_MILLIS = 1_000
MILLIS_PER_SECOND = 1_000

# Label the platform puts on every sub-run and execution unit of a run.
BUILDRUN_NAME_LABEL = "buildrun.shipwright.io/name"

# Field manager name used by the build controller when it updates a Build.
BUILD_CONTROLLER_MANAGER = "shipwright-build-controller"

VERIFY_REPOSITORY_ANNOTATION = "build.shipwright.io/verify.repository"

DEFAULT_NAMESPACE = "default"
DEFAULT_PREFIX = "test"

SHIPWRIGHT_GROUP = "shipwright.io"
SHIPWRIGHT_VERSION = "v1alpha1"
TEKTON_GROUP = "tekton.dev"
TEKTON_VERSION = "v1beta1"
