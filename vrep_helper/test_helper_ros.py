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

import pytest

from vrep_helper.config import VrepConfig
from vrep_helper.helper import VrepHelper


@pytest.mark.ros
def test_no_simulator_reports_failure() -> None:
    pytest.importorskip("vrep_common.srv")
    import rclpy

    rclpy.init()
    node = rclpy.create_node("vrep_helper_test")
    try:
        config = VrepConfig(service_namespace="vrep_helper_test_absent", service_timeout=0.2)
        with VrepHelper(node, config=config) as vrep:
            assert vrep.start() is False
            assert vrep.get_handle("Cuboid") == -1
            assert vrep.get_pose(0) is None
            assert vrep.is_running() is False
    finally:
        node.destroy_node()
        rclpy.shutdown()
