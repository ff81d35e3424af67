# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from pathlib import Path

from pydantic import ValidationError
import pytest

from vrep_helper.config import VrepConfig


def test_defaults() -> None:
    config = VrepConfig()

    assert config.service_name("simRosStartSimulation") == "vrep/simRosStartSimulation"
    assert config.info_topic == "/vrep/info"
    assert config.interface_package == "vrep_common"
    assert config.package_root is None


def test_environment_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("VREP_SERVICE_NAMESPACE", "coppelia")
    monkeypatch.setenv("VREP_SERVICE_TIMEOUT", "0.5")
    monkeypatch.setenv("VREP_PACKAGE_ROOT", str(tmp_path))

    config = VrepConfig()

    assert config.service_name("simRosLoadScene") == "coppelia/simRosLoadScene"
    assert config.service_timeout == 0.5
    assert config.package_root == tmp_path


def test_empty_namespace() -> None:
    assert VrepConfig(service_namespace="").service_name("x") == "x"


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        VrepConfig(service_timeout=0)


def test_frozen() -> None:
    config = VrepConfig()
    with pytest.raises(ValidationError):
        config.node_name = "other"
