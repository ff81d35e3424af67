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

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VrepConfig(BaseSettings):
    node_name: str = "vrep_helper"
    service_namespace: str = "vrep"
    info_topic: str = "/vrep/info"
    interface_package: str = "vrep_common"
    service_timeout: float = Field(default=5.0, gt=0)
    # Directory holding ROS packages; falls back to the ament index when unset.
    package_root: Path | None = None
    default_package: str = "tapir"

    model_config = SettingsConfigDict(
        env_prefix="VREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    def service_name(self, service: str) -> str:
        ns = self.service_namespace.strip("/")
        return f"{ns}/{service}" if ns else service
