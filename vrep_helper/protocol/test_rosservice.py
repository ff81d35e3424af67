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

from concurrent.futures import Future

import pytest

from vrep_helper.protocol.rosservice import (
    Executor,
    ROSService,
    ServiceClient,
    call_service,
    load_interface,
)
from vrep_helper.testing import MockClient, MockExecutor, MockROSNode, SimRosLoadScene


@pytest.fixture
def service():
    return ROSService("vrep/simRosLoadScene", SimRosLoadScene)


@pytest.fixture
def mock_client(service):
    return MockClient(service.srv_type, service.name)


@pytest.fixture
def mock_executor():
    return MockExecutor(MockROSNode())


def test_mocks_satisfy_protocols(mock_client, mock_executor) -> None:
    assert isinstance(mock_client, ServiceClient)
    assert isinstance(mock_executor, Executor)


def test_call_service_returns_response(service, mock_client, mock_executor) -> None:
    mock_client.respond(result=1)
    request = SimRosLoadScene.Request(file_name="/x.ttt")

    response = call_service(service, mock_client, request, mock_executor, timeout_sec=0.1)

    assert response.result == 1
    assert mock_client.requests == [request]


def test_call_service_waits_on_the_executor(service, mock_client) -> None:
    class RecordingExecutor:
        def __init__(self) -> None:
            self.waited: list[tuple[Future, float]] = []

        def spin_once(self, timeout_sec=None) -> None:
            pass

        def spin_until_future_complete(self, future, timeout_sec=None) -> None:
            self.waited.append((future, timeout_sec))

    executor = RecordingExecutor()
    call_service(service, mock_client, SimRosLoadScene.Request(), executor, timeout_sec=2.0)

    assert len(executor.waited) == 1
    assert executor.waited[0][1] == 2.0


def test_call_service_unavailable(service, mock_client, mock_executor) -> None:
    mock_client.available = False

    assert call_service(service, mock_client, SimRosLoadScene.Request(), mock_executor, 0.1) is None
    assert mock_client.requests == []


def test_call_service_timeout_cancels_future(service, mock_client, mock_executor) -> None:
    futures: list[Future] = []
    mock_client.hang = True
    original = mock_client.call_async

    def capture(request):
        future = original(request)
        futures.append(future)
        return future

    mock_client.call_async = capture

    assert call_service(service, mock_client, SimRosLoadScene.Request(), mock_executor, 0.1) is None
    assert futures[0].cancelled()


def test_call_service_exception(service, mock_client, mock_executor) -> None:
    def fail(_request):
        raise ValueError("bad request")

    mock_client.handler = fail

    assert call_service(service, mock_client, SimRosLoadScene.Request(), mock_executor, 0.1) is None


def test_load_interface() -> None:
    assert load_interface("vrep_helper", "testing", "SimRosLoadScene") is SimRosLoadScene


def test_load_interface_missing_package() -> None:
    with pytest.raises(ImportError, match="not importable"):
        load_interface("no_such_interfaces", "srv", "simRosLoadScene")


def test_load_interface_missing_type() -> None:
    with pytest.raises(ImportError, match="no interface named"):
        load_interface("vrep_helper", "testing", "simRosTeleport")
