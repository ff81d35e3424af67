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

from __future__ import annotations

from collections.abc import Mapping
import numbers
from pathlib import Path
from types import TracebackType
from typing import Any

from reactivex.observable import Observable
from reactivex.subject import Subject

from vrep_helper.config import VrepConfig
from vrep_helper.constants import CALL_FAILED, INVALID_HANDLE, SIM_STATE_RUNNING
from vrep_helper.protocol.rosservice import (
    ROSService,
    call_service,
    create_executor,
    load_interface,
)
from vrep_helper.types.pose import PoseStamped
from vrep_helper.types.vector import VectorLike, to_position
from vrep_helper.utils.logging_config import setup_logger

logger = setup_logger()

__all__ = ["SERVICE_TYPES", "VrepHelper"]

# Helper operation -> V-REP ROS service/interface name.
SERVICE_TYPES: dict[str, str] = {
    "start": "simRosStartSimulation",
    "stop": "simRosStopSimulation",
    "copy": "simRosCopyPasteObjects",
    "handle": "simRosGetObjectHandle",
    "move": "simRosSetObjectPosition",
    "pose": "simRosGetObjectPose",
    "load": "simRosLoadScene",
}

INFO_MSG_TYPE = "VrepInfo"

# Subscriber queue depth for the info topic; only the latest state matters.
INFO_QUEUE_DEPTH = 1

# Scene load reports success with exactly this result code.
LOAD_SCENE_OK = 1


class VrepHelper:
    """Client-side adapter over the V-REP ROS services.

    Holds one service client per supported call plus a subscription to the
    simulator info topic that tracks whether the simulation is running.

    The helper can be created unbound and attached to a node later with
    ``set_ros_node``. Interface types are imported from
    ``config.interface_package`` unless passed in ``interfaces``, keyed by
    their V-REP name (``"simRosLoadScene"``, ``"VrepInfo"``, ...).

    When an ``executor`` is supplied it must already be spinning the node
    handed to ``set_ros_node``; otherwise the helper creates and owns one.
    """

    def __init__(
        self,
        node: Any | None = None,
        *,
        config: VrepConfig | None = None,
        executor: Any | None = None,
        interfaces: Mapping[str, type] | None = None,
    ) -> None:
        self.config = config or VrepConfig()
        self._interfaces: dict[str, type] = dict(interfaces or {})
        self._executor = executor
        self._owns_executor = False

        self._node: Any | None = None
        self._services: dict[str, tuple[ROSService, Any]] = {}
        self._info_sub: Any | None = None

        self._running = False
        self._run_state_subject: Subject[bool] = Subject()

        if node is not None:
            self.set_ros_node(node)

    # Binding -----------------------------------------------------------------

    def set_ros_node(self, node: Any) -> None:
        """Bind the helper to a ROS node, creating every client and the info subscription.

        Interface types are resolved before any existing binding is released.
        """
        services = {
            key: ROSService(
                name=self.config.service_name(type_name),
                srv_type=self._interface("srv", type_name),
            )
            for key, type_name in SERVICE_TYPES.items()
        }
        info_type = self._interface("msg", INFO_MSG_TYPE)

        if self._node is not None:
            self._release_node()

        if self._executor is None:
            self._executor = create_executor(node)
            self._owns_executor = True
        elif self._owns_executor:
            self._executor.add_node(node)

        self._node = node
        for key, service in services.items():
            client = node.create_client(service.srv_type, service.name)
            self._services[key] = (service, client)

        self._info_sub = node.create_subscription(
            info_type,
            self.config.info_topic,
            self._info_callback,
            INFO_QUEUE_DEPTH,
        )

        logger.info(
            "Bound to ROS node",
            namespace=self.config.service_namespace,
            info_topic=self.config.info_topic,
        )

    @property
    def node(self) -> Any | None:
        return self._node

    # Simulation control ------------------------------------------------------

    def start(self) -> bool:
        """Start or unpause the simulation. V-REP itself must already be running."""
        response = self._call("start", self._request("start"))
        return response is not None and response.result != CALL_FAILED

    def stop(self) -> bool:
        """Stop the simulation."""
        response = self._call("stop", self._request("stop"))
        return response is not None and response.result != CALL_FAILED

    def is_running(self) -> bool:
        """Return True iff the simulation is neither stopped nor paused.

        Pending info messages are delivered first so the answer reflects the
        latest status the simulator published.
        """
        self._require_node()
        self._executor.spin_once(timeout_sec=0)
        return self._running

    def run_state_stream(self) -> Observable[bool]:
        """Observable emitting the new run state each time it changes."""
        return self._run_state_subject

    # Objects -----------------------------------------------------------------

    def get_handle(self, name: str) -> int:
        """Return the handle of a named object, or -1 if it cannot be resolved."""
        request = self._request("handle")
        request.object_name = name
        response = self._call("handle", request)
        if response is None:
            return INVALID_HANDLE
        return int(response.handle)

    def move_object(
        self,
        target: str | int,
        x: float | VectorLike,
        y: float | None = None,
        z: float | None = None,
    ) -> bool:
        """Move an object, given by name or handle, to an absolute position.

        The position is either three coordinates or a single vector-like value:

            helper.move_object("Cuboid", 0.1, 0.2, 0.3)
            helper.move_object(handle, Vector(0.1, 0.2, 0.3))
        """
        if y is None and z is None:
            position = to_position(x)
        else:
            position = to_position((x, y, z))

        if isinstance(target, str):
            handle = self.get_handle(target)
        elif isinstance(target, numbers.Integral) and not isinstance(target, bool):
            handle = int(target)
        else:
            raise TypeError(f"move_object target must be a name or a handle, got {target!r}")

        request = self._request("move")
        request.handle = handle
        request.relative_to_object_handle = INVALID_HANDLE
        request.position.x = position.x
        request.position.y = position.y
        request.position.z = position.z
        response = self._call("move", request)
        return response is not None and response.result != CALL_FAILED

    def copy_object(self, handle: int) -> int:
        """Copy an object and return the handle of the copy, or -1 on failure."""
        request = self._request("copy")
        request.object_handles = [int(handle)]
        response = self._call("copy", request)
        if response is None:
            return INVALID_HANDLE
        new_handles = list(response.new_object_handles)
        if not new_handles:
            logger.warning("Copy returned no handles", handle=handle)
            return INVALID_HANDLE
        return int(new_handles[0])

    def get_pose(self, handle: int) -> PoseStamped | None:
        """Return the absolute pose of an object, or None on failure."""
        request = self._request("pose")
        request.handle = int(handle)
        request.relative_to_object_handle = INVALID_HANDLE
        response = self._call("pose", request)
        if response is None or getattr(response, "result", 0) == CALL_FAILED:
            return None
        return PoseStamped.from_ros_msg(response.pose)

    # Scenes ------------------------------------------------------------------

    def load_scene(self, full_path: str | Path) -> bool:
        """Load a V-REP scene (.ttt file) from an absolute path."""
        request = self._request("load")
        request.file_name = str(full_path)
        response = self._call("load", request)
        return response is not None and response.result == LOAD_SCENE_OK

    def load_problem_scene(
        self,
        problem_name: str,
        relative_path: str | Path,
        package_name: str | None = None,
    ) -> bool:
        """Load a scene from ``<package path>/problems/<problem_name>/<relative_path>``."""
        package = package_name or self.config.default_package
        full_path = self.package_path(package) / "problems" / problem_name / relative_path
        return self.load_scene(full_path)

    def package_path(self, package_name: str) -> Path:
        """Locate a ROS package directory, via ``config.package_root`` or the ament index."""
        if self.config.package_root is not None:
            return Path(self.config.package_root) / package_name

        from ament_index_python.packages import (  # type: ignore[import-not-found]
            get_package_share_directory,
        )

        return Path(get_package_share_directory(package_name))

    # Lifecycle ---------------------------------------------------------------

    def close(self) -> None:
        """Destroy clients and the subscription, and shut down an owned executor."""
        if self._node is not None:
            self._release_node()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown()
            self._executor = None
            self._owns_executor = False
        self._run_state_subject.on_completed()

    def __enter__(self) -> VrepHelper:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # Internals ---------------------------------------------------------------

    def _info_callback(self, msg: Any) -> None:
        running = msg.simulator_state.data == SIM_STATE_RUNNING
        if running != self._running:
            logger.info("Simulation run state changed", running=running)
            self._running = running
            self._run_state_subject.on_next(running)

    def _interface(self, kind: str, type_name: str) -> type:
        if type_name not in self._interfaces:
            self._interfaces[type_name] = load_interface(
                self.config.interface_package, kind, type_name
            )
        return self._interfaces[type_name]

    def _require_node(self) -> None:
        if self._node is None:
            raise RuntimeError("VrepHelper has no ROS node; call set_ros_node() first")

    def _request(self, key: str) -> Any:
        self._require_node()
        service, _ = self._services[key]
        return service.srv_type.Request()

    def _call(self, key: str, request: Any) -> Any | None:
        service, client = self._services[key]
        return call_service(
            service,
            client,
            request,
            self._executor,
            timeout_sec=self.config.service_timeout,
        )

    def _release_node(self) -> None:
        node = self._node
        for _, client in self._services.values():
            node.destroy_client(client)
        self._services.clear()
        if self._info_sub is not None:
            node.destroy_subscription(self._info_sub)
            self._info_sub = None
        if self._owns_executor and self._executor is not None:
            self._executor.remove_node(node)
        self._node = None
        if self._running:
            self._running = False
            self._run_state_subject.on_next(False)
