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

from setuptools import find_packages, setup

# rclpy, ament_index_python and the vrep_common interfaces come from a sourced
# ROS 2 workspace, not from PyPI.
setup(
    name="vrep-helper",
    version="0.1.0",
    description="Thin ROS 2 client for the V-REP / CoppeliaSim simulator services",
    license="Apache-2.0",
    python_requires=">=3.10",
    packages=find_packages(include=["vrep_helper", "vrep_helper.*"]),
    package_dir={"": "."},
    install_requires=[
        "numpy>=1.24",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "reactivex>=4.0",
        "structlog>=23.1",
        "typer>=0.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "vrep-helper=vrep_helper.cli.vrep_cli:main",
        ],
    },
)
