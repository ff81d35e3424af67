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

VREP_PROJECT_ROOT = Path(__file__).parent.parent

VREP_LOG_DIR = VREP_PROJECT_ROOT / "logs"

# Returned by the simulator when an object or call is unknown.
INVALID_HANDLE = -1

# VrepInfo.simulator_state value for a running, unpaused simulation.
SIM_STATE_RUNNING = 1

# Result code of a failed service call.
CALL_FAILED = -1
