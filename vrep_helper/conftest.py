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

import importlib.util
import threading

import pytest

from vrep_helper.testing import (
    MockExecutor,
    MockROSNode,
    VrepInfo,
    make_interfaces,
)
from vrep_helper.config import VrepConfig
from vrep_helper.helper import VrepHelper

ROS_AVAILABLE = importlib.util.find_spec("rclpy") is not None


def pytest_configure(config):
    config.addinivalue_line("markers", "ros: needs a sourced ROS 2 installation")


def pytest_collection_modifyitems(config, items):
    if ROS_AVAILABLE:
        return
    skip_ros = pytest.mark.skip(reason="rclpy is not installed")
    for item in items:
        if item.get_closest_marker("ros"):
            item.add_marker(skip_ros)


@pytest.fixture(autouse=True)
def monitor_threads(request):
    if request.node.get_closest_marker("ros"):
        yield
        return

    before = {t.ident for t in threading.enumerate()}
    yield
    leaked = [t.name for t in threading.enumerate() if t.ident not in before and t.is_alive()]
    if leaked:
        pytest.fail(f"Test left threads running: {leaked}")


@pytest.fixture
def node():
    return MockROSNode()


@pytest.fixture
def executor(node):
    return MockExecutor(node)


@pytest.fixture
def helper(node, executor, tmp_path):
    config = VrepConfig(package_root=tmp_path, service_timeout=0.1)
    vrep = VrepHelper(node, config=config, executor=executor, interfaces=make_interfaces())
    yield vrep
    vrep.close()


@pytest.fixture
def publish_info(node):
    def publish(state: int) -> None:
        node.publish("/vrep/info", VrepInfo(state))

    return publish
