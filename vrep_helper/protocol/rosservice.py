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

from dataclasses import dataclass
import importlib
from typing import Any, Protocol, runtime_checkable

try:
    import rclpy
    from rclpy.executors import SingleThreadedExecutor

    ROS_AVAILABLE = True
except ImportError:
    ROS_AVAILABLE = False
    rclpy = None  # type: ignore[assignment]
    SingleThreadedExecutor = None  # type: ignore[assignment, misc]

from vrep_helper.utils.logging_config import setup_logger

logger = setup_logger()


@runtime_checkable
class ServiceClient(Protocol):
    """The slice of rclpy.client.Client used to talk to the simulator."""

    def wait_for_service(self, timeout_sec: float | None = None) -> bool: ...

    def call_async(self, request: Any) -> Any: ...


@runtime_checkable
class Executor(Protocol):
    """The slice of rclpy.executors.Executor used to deliver callbacks and responses."""

    def spin_once(self, timeout_sec: float | None = None) -> None: ...

    def spin_until_future_complete(self, future: Any, timeout_sec: float | None = None) -> None: ...


@dataclass(frozen=True)
class ROSService:
    """Service descriptor: remote name plus the interface type it speaks."""

    name: str
    srv_type: type


def load_interface(package: str, kind: str, type_name: str) -> type:
    """Import an interface class such as ``vrep_common.srv.simRosLoadScene``.

    Raises:
        ImportError: if the interface package or type is not available.
    """
    module_name = f"{package}.{kind}"
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ImportError(
            f"ROS interface package '{module_name}' is not importable; "
            "build and source it, or pass the interface types explicitly"
        ) from e

    try:
        return getattr(module, type_name)
    except AttributeError:
        raise ImportError(f"{module_name} has no interface named {type_name}") from None


def create_executor(node: Any) -> Any:
    """Create a single-threaded executor that spins only the given node."""
    if not ROS_AVAILABLE:
        raise ImportError("rclpy is not installed. VrepHelper requires ROS 2.")

    executor = SingleThreadedExecutor()
    executor.add_node(node)
    return executor


def call_service(
    service: ROSService,
    client: ServiceClient,
    request: Any,
    executor: Executor,
    timeout_sec: float,
) -> Any | None:
    """Call a service and block until its response arrives.

    Returns:
        The response, or None if the service was unavailable, timed out or failed.
    """
    if not client.wait_for_service(timeout_sec=timeout_sec):
        logger.warning("Service not available", service=service.name, timeout=timeout_sec)
        return None

    future = client.call_async(request)
    executor.spin_until_future_complete(future, timeout_sec=timeout_sec)

    if not future.done():
        logger.warning("Service call timed out", service=service.name, timeout=timeout_sec)
        if hasattr(future, "cancel"):
            future.cancel()
        return None

    try:
        return future.result()
    except Exception:
        logger.exception("Service call failed", service=service.name)
        return None
