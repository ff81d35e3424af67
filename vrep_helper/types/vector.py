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

from collections.abc import Sequence
from typing import Any, TypeVar, Union

import numpy as np

T = TypeVar("T", bound="Vector")

# Anything with x/y/z attributes (geometry_msgs Point, Vector3) also converts.
VectorLike = Union[Sequence[Union[int, float]], "Vector", np.ndarray, Any]


class Vector:
    """A wrapper around numpy arrays for positions sent to and read from the simulator."""

    def __init__(self, *args: VectorLike) -> None:
        """Initialize a vector from components or another iterable.

        Examples:
            Vector(1, 2, 3)              # From components
            Vector([1, 2, 3])            # From list
            Vector(np.array([1, 2, 3]))  # From numpy array
            Vector(point_msg)            # From a ROS Point/Vector3
        """
        if len(args) == 1 and isinstance(args[0], Vector):
            self._data = args[0]._data.copy()
        elif len(args) == 1 and hasattr(args[0], "__iter__"):
            self._data = np.array(args[0], dtype=float)
        elif len(args) == 1 and hasattr(args[0], "x"):
            self._data = np.array([args[0].x, args[0].y, args[0].z], dtype=float)
        else:
            self._data = np.array(args, dtype=float)

    @property
    def x(self) -> float:
        """X component of the vector."""
        return float(self._data[0]) if len(self._data) > 0 else 0.0

    @property
    def y(self) -> float:
        """Y component of the vector."""
        return float(self._data[1]) if len(self._data) > 1 else 0.0

    @property
    def z(self) -> float:
        """Z component of the vector."""
        return float(self._data[2]) if len(self._data) > 2 else 0.0

    @property
    def dim(self) -> int:
        return len(self._data)

    @property
    def data(self) -> np.ndarray:
        return self._data

    def to_tuple(self) -> tuple[float, ...]:
        return tuple(float(v) for v in self._data)

    def __getitem__(self, idx):
        return self._data[idx]

    def __iter__(self):
        return iter(self.to_tuple())

    def __len__(self) -> int:
        return self.dim

    def __repr__(self) -> str:
        return f"Vector({self._data})"

    def __eq__(self, other) -> bool:
        """Check if two vectors are equal using numpy's allclose for floating point comparison."""
        if not isinstance(other, Vector):
            return False
        if len(self._data) != len(other._data):
            return False
        return bool(np.allclose(self._data, other._data))

    def __add__(self: T, other) -> T:
        if isinstance(other, Vector):
            return self.__class__(self._data + other._data)
        return self.__class__(self._data + np.array(other, dtype=float))

    def __sub__(self: T, other) -> T:
        if isinstance(other, Vector):
            return self.__class__(self._data - other._data)
        return self.__class__(self._data - np.array(other, dtype=float))

    def __mul__(self: T, scalar: float) -> T:
        return self.__class__(self._data * scalar)

    def __rmul__(self: T, scalar: float) -> T:
        return self.__mul__(scalar)

    def length(self) -> float:
        """Compute the Euclidean length (magnitude) of the vector."""
        return float(np.linalg.norm(self._data))

    def distance(self, other: VectorLike) -> float:
        """Compute Euclidean distance to another vector."""
        return (self - to_vector(other)).length()

    def is_zero(self) -> bool:
        return bool(np.allclose(self._data, 0.0))

    def serialize(self) -> dict:
        return {"type": "vector", "c": self._data.tolist()}


def to_vector(value: VectorLike) -> Vector:
    """Convert any VectorLike into a Vector, returning Vectors unchanged."""
    if isinstance(value, Vector):
        return value
    return Vector(value)


def to_position(value: VectorLike) -> Vector:
    """Convert a VectorLike into a 3D position vector.

    Raises:
        ValueError: if the value does not have exactly three components.
    """
    vec = to_vector(value)
    if vec.dim != 3:
        raise ValueError(f"Position must have 3 components, got {vec.dim}")
    return vec
