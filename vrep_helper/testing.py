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

"""In-memory stand-ins for rclpy nodes, clients, executors and V-REP interfaces.

They record every call so tests can assert on the exact requests sent to the
simulator without a ROS installation.
"""

from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any

from vrep_helper.helper import INFO_MSG_TYPE


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Quaternion:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass
class Pose:
    position: Point = field(default_factory=Point)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass
class Time:
    sec: int = 0
    nanosec: int = 0


@dataclass
class Header:
    stamp: Time = field(default_factory=Time)
    frame_id: str = ""


@dataclass
class PoseStampedMsg:
    header: Header = field(default_factory=Header)
    pose: Pose = field(default_factory=Pose)


@dataclass
class Int32:
    data: int = 0


class VrepInfo:
    def __init__(self, state: int = 0) -> None:
        self.simulator_state = Int32(state)


def _srv(
    name: str,
    request_fields: dict[str, Callable[[], Any]],
    response_fields: dict[str, Callable[[], Any]],
) -> type:
    def make(kind: str, fields: dict[str, Callable[[], Any]]) -> type:
        def __init__(self, **kwargs: Any) -> None:
            for key, factory in fields.items():
                setattr(self, key, kwargs.pop(key) if key in kwargs else factory())
            if kwargs:
                raise TypeError(f"{name}.{kind} has no fields {sorted(kwargs)}")

        return type(kind, (), {"__init__": __init__, "__slots__": tuple(fields)})

    return type(
        name,
        (),
        {
            "Request": make("Request", request_fields),
            "Response": make("Response", response_fields),
        },
    )


def _int() -> int:
    return 0


def _list() -> list:
    return []


SimRosStartSimulation = _srv("simRosStartSimulation", {}, {"result": _int})
SimRosStopSimulation = _srv("simRosStopSimulation", {}, {"result": _int})
SimRosCopyPasteObjects = _srv(
    "simRosCopyPasteObjects", {"object_handles": _list}, {"new_object_handles": _list}
)
SimRosGetObjectHandle = _srv("simRosGetObjectHandle", {"object_name": str}, {"handle": _int})
SimRosSetObjectPosition = _srv(
    "simRosSetObjectPosition",
    {"handle": _int, "relative_to_object_handle": _int, "position": Point},
    {"result": _int},
)
SimRosGetObjectPose = _srv(
    "simRosGetObjectPose",
    {"handle": _int, "relative_to_object_handle": _int},
    {"result": _int, "pose": PoseStampedMsg},
)
SimRosLoadScene = _srv("simRosLoadScene", {"file_name": str}, {"result": _int})


def make_interfaces() -> dict[str, type]:
    """Interface types keyed by V-REP name, as accepted by ``VrepHelper(interfaces=...)``."""
    interfaces: dict[str, type] = {
        srv.__name__: srv
        for srv in (
            SimRosStartSimulation,
            SimRosStopSimulation,
            SimRosCopyPasteObjects,
            SimRosGetObjectHandle,
            SimRosSetObjectPosition,
            SimRosGetObjectPose,
            SimRosLoadScene,
        )
    }
    interfaces[INFO_MSG_TYPE] = VrepInfo
    return interfaces


class MockClient:
    """Service client answering through ``handler(request) -> response``."""

    def __init__(self, srv_type: type, name: str) -> None:
        self.srv_type = srv_type
        self.name = name
        self.available = True
        self.hang = False
        self.handler: Callable[[Any], Any] | None = None
        self.requests: list[Any] = []
        self.destroyed = False

    def respond(self, **fields: Any) -> None:
        """Answer every future call with a response carrying these fields."""
        self.handler = lambda _request: self.srv_type.Response(**fields)

    def wait_for_service(self, timeout_sec: float | None = None) -> bool:
        return self.available

    def call_async(self, request: Any) -> Future:
        self.requests.append(request)
        future: Future = Future()
        if self.hang:
            return future
        try:
            handler = self.handler or (lambda _request: self.srv_type.Response())
            future.set_result(handler(request))
        except Exception as e:
            future.set_exception(e)
        return future


class MockSubscription:
    def __init__(self, msg_type: type, topic: str, callback: Callable[[Any], None], qos: Any) -> None:
        self.msg_type = msg_type
        self.topic = topic
        self.callback = callback
        self.qos = qos


class MockROSNode:
    """Records created clients/subscriptions and queues published messages."""

    def __init__(self) -> None:
        self.clients: dict[str, MockClient] = {}
        self.subscriptions: dict[str, MockSubscription] = {}
        self.destroyed_clients: list[MockClient] = []
        self.destroyed_subscriptions: list[MockSubscription] = []
        # Latest undelivered message per topic, mirroring a depth-1 queue.
        self.pending: dict[str, Any] = {}
        self.destroyed = False

    def create_client(self, srv_type: type, name: str) -> MockClient:
        client = MockClient(srv_type, name)
        self.clients[name] = client
        return client

    def destroy_client(self, client: MockClient) -> None:
        client.destroyed = True
        self.destroyed_clients.append(client)
        self.clients.pop(client.name, None)

    def create_subscription(
        self, msg_type: type, topic: str, callback: Callable[[Any], None], qos: Any
    ) -> MockSubscription:
        sub = MockSubscription(msg_type, topic, callback, qos)
        self.subscriptions[topic] = sub
        return sub

    def destroy_subscription(self, subscription: MockSubscription) -> None:
        self.destroyed_subscriptions.append(subscription)
        self.subscriptions.pop(subscription.topic, None)

    def publish(self, topic: str, msg: Any) -> None:
        self.pending[topic] = msg

    def destroy_node(self) -> None:
        self.destroyed = True


class MockExecutor:
    """Delivers queued messages on ``spin_once``; responses are already resolved."""

    def __init__(self, node: MockROSNode) -> None:
        self.node = node
        self.spin_count = 0
        self.is_shutdown = False

    def spin_once(self, timeout_sec: float | None = None) -> None:
        self.spin_count += 1
        pending, self.node.pending = self.node.pending, {}
        for topic, msg in pending.items():
            sub = self.node.subscriptions.get(topic)
            if sub is not None:
                sub.callback(msg)

    def spin_until_future_complete(self, future: Any, timeout_sec: float | None = None) -> None:
        pass

    def add_node(self, node: MockROSNode) -> None:
        self.node = node

    def remove_node(self, node: MockROSNode) -> None:
        pass

    def shutdown(self) -> None:
        self.is_shutdown = True
