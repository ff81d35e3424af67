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

from dataclasses import dataclass, field
import time
from typing import Any

import numpy as np

from vrep_helper.types.vector import Vector, VectorLike, to_position


def _stamp_to_seconds(stamp: Any) -> float:
    if stamp is None:
        return 0.0
    # ROS 2 builtin_interfaces/Time uses nanosec, ROS 1 style stamps use nsec.
    nsec = getattr(stamp, "nanosec", getattr(stamp, "nsec", 0))
    return float(stamp.sec) + float(nsec) / 1_000_000_000.0


@dataclass
class PoseStamped:
    """Pose of a simulated object as reported by the simulator."""

    position: Vector = field(default_factory=lambda: Vector(0.0, 0.0, 0.0))
    orientation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    frame_id: str = ""
    ts: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        self.position = to_position(self.position)
        self.orientation = tuple(float(v) for v in self.orientation)  # type: ignore[assignment]
        if len(self.orientation) != 4:
            raise ValueError(f"Orientation must be an (x, y, z, w) quaternion, got {self.orientation}")

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def z(self) -> float:
        return self.position.z

    @classmethod
    def from_ros_msg(cls, msg: Any) -> PoseStamped:
        """Create a PoseStamped from a ROS geometry_msgs/PoseStamped message."""
        pose = msg.pose
        header = getattr(msg, "header", None)
        return cls(
            position=Vector(pose.position),
            orientation=(
                pose.orientation.x,
                pose.orientation.y,
                pose.orientation.z,
                pose.orientation.w,
            ),
            frame_id=getattr(header, "frame_id", ""),
            ts=_stamp_to_seconds(getattr(header, "stamp", None)),
        )

    def distance(self, other: PoseStamped | VectorLike) -> float:
        target = other.position if isinstance(other, PoseStamped) else other
        return self.position.distance(target)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PoseStamped):
            return False
        return (
            self.position == other.position
            and bool(np.allclose(self.orientation, other.orientation))
            and self.frame_id == other.frame_id
        )

    def __str__(self) -> str:
        return (
            f"PoseStamped(pos=[{self.x:.3f}, {self.y:.3f}, {self.z:.3f}], "
            f"quat=[{', '.join(f'{v:.3f}' for v in self.orientation)}], "
            f"frame_id='{self.frame_id}')"
        )
