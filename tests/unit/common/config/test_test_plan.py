# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for test plan parsing."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from buildload.common.config import TestPlan
from buildload.common.enums import StrategyKind

PLAN = """
namespace: build-tests
generateServiceAccount: true
steps:
  - name: kaniko-go
    buildAnnotations:
      build.shipwright.io/verify.repository: "false"
    buildSpec:
      source:
        url: https://github.com/shipwright-io/sample-go
        revision: main
        contextDir: docker-build
        credentials:
          name: git-credentials
      strategy:
        name: kaniko
        kind: ClusterBuildStrategy
      dockerfile: Dockerfile
      timeout: 600
      output:
        image: docker.io/org
        credentials:
          name: registry-credentials
  - name: buildpacks-node
    buildSpec:
      source:
        url: https://github.com/shipwright-io/sample-nodejs
      strategy:
        name: buildpacks-v3
      output:
        image: docker.io/org/node
"""


class TestTestPlanParsing:
    """Tests for TestPlan.from_yaml and TestPlan.from_file."""

    def test_full_plan(self):
        plan = TestPlan.from_yaml(PLAN)

        assert plan.namespace == "build-tests"
        assert plan.generate_service_account is True
        assert [step.name for step in plan.steps] == ["kaniko-go", "buildpacks-node"]

        first = plan.steps[0]
        assert first.build_annotations == {"build.shipwright.io/verify.repository": "false"}
        assert first.build_spec.source.revision == "main"
        assert first.build_spec.source.context_dir == "docker-build"
        assert first.build_spec.source.credentials.name == "git-credentials"
        assert first.build_spec.strategy.kind == StrategyKind.CLUSTER_BUILD_STRATEGY
        assert first.build_spec.dockerfile == "Dockerfile"
        assert first.build_spec.timeout == timedelta(minutes=10)
        assert first.build_spec.output.credentials.name == "registry-credentials"

    def test_defaults(self):
        step = TestPlan.from_yaml(PLAN).steps[1]

        assert step.build_annotations == {}
        assert step.build_spec.dockerfile is None
        assert step.build_spec.source.context_dir is None
        assert step.build_spec.strategy.kind == StrategyKind.CLUSTER_BUILD_STRATEGY

    def test_empty_document(self):
        plan = TestPlan.from_yaml("")
        assert plan.namespace == "default"
        assert plan.steps == []

    def test_missing_build_spec(self):
        with pytest.raises(ValidationError):
            TestPlan.from_yaml("steps:\n  - name: broken\n")

    def test_from_file(self, tmp_path):
        path = tmp_path / "plan.yaml"
        path.write_text(PLAN, encoding="utf-8")

        assert len(TestPlan.from_file(path).steps) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TestPlan.from_file(tmp_path / "missing.yaml")


def plan_with_timeout(timeout: str) -> str:
    return f"""
steps:
  - name: kaniko-go
    buildSpec:
      source:
        url: https://github.com/shipwright-io/sample-go
      strategy:
        name: kaniko
      output:
        image: docker.io/org
      timeout: {timeout}
"""


class TestTestPlanTimeout:
    """Tests for the build timeout of a test plan step."""

    @pytest.mark.parametrize(
        "timeout,expected",
        [
            ("10m", timedelta(minutes=10)),
            ("1h30m", timedelta(hours=1, minutes=30)),
            ("90s", timedelta(seconds=90)),
            ("45", timedelta(seconds=45)),
        ],
    )
    def test_duration_forms(self, timeout, expected):
        step = TestPlan.from_yaml(plan_with_timeout(timeout)).steps[0]
        assert step.build_spec.timeout == expected

    def test_invalid_duration(self):
        with pytest.raises(ValidationError):
            TestPlan.from_yaml(plan_with_timeout("ten minutes"))
