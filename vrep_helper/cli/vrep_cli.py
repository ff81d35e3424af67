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

from collections.abc import Iterator
from contextlib import contextmanager
import inspect
from pathlib import Path
import time
import types
from typing import Optional, Union, get_args, get_origin

import typer

from vrep_helper.config import VrepConfig
from vrep_helper.helper import VrepHelper
from vrep_helper.protocol.rosservice import ROS_AVAILABLE, rclpy

main = typer.Typer(help="Drive a running V-REP simulator over its ROS services.")


def _unwrap_optional(annotation: object) -> object:
    if get_origin(annotation) in (Union, types.UnionType):
        inner = [t for t in get_args(annotation) if t is not type(None)]
        if len(inner) == 1:
            return inner[0]
    return annotation


def create_config_callback():
    """Build a typer callback exposing every VrepConfig field as an override option."""
    params = [
        inspect.Parameter("ctx", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=typer.Context),
    ]

    for field_name, field_info in VrepConfig.model_fields.items():
        actual_type = _unwrap_optional(field_info.annotation)
        cli_option_name = field_name.replace("_", "-")
        params.append(
            inspect.Parameter(
                field_name,
                inspect.Parameter.KEYWORD_ONLY,
                default=typer.Option(
                    None,  # None keeps the settings value
                    f"--{cli_option_name}",
                    help=f"Override {field_name} (env VREP_{field_name.upper()})",
                ),
                annotation=Optional[actual_type],  # noqa: UP045
            )
        )

    def callback(**kwargs) -> None:
        ctx = kwargs.pop("ctx")
        overrides = {k: v for k, v in kwargs.items() if v is not None}
        ctx.obj = VrepConfig().model_copy(update=overrides)

    callback.__signature__ = inspect.Signature(params)

    return callback


main.callback()(create_config_callback())


@contextmanager
def vrep_session(config: VrepConfig) -> Iterator[VrepHelper]:
    """Create a ROS node, bind a VrepHelper to it, and tear both down afterwards."""
    if not ROS_AVAILABLE:
        typer.echo("rclpy is not installed; source a ROS 2 environment first.", err=True)
        raise typer.Exit(code=2)

    # Only tear down a ROS context this session created.
    owns_context = not rclpy.ok()
    if owns_context:
        rclpy.init()
    node = rclpy.create_node(config.node_name)
    try:
        with VrepHelper(node, config=config) as helper:
            yield helper
    finally:
        node.destroy_node()
        if owns_context and rclpy.ok():
            rclpy.shutdown()


def _finish(ok: bool) -> None:
    typer.echo("ok" if ok else "failed")
    raise typer.Exit(code=0 if ok else 1)


def _parse_target(target: str) -> str | int:
    try:
        return int(target)
    except ValueError:
        return target


@main.command()
def start(ctx: typer.Context) -> None:
    """Start or unpause the simulation."""
    with vrep_session(ctx.obj) as helper:
        ok = helper.start()
    _finish(ok)


@main.command()
def stop(ctx: typer.Context) -> None:
    """Stop the simulation."""
    with vrep_session(ctx.obj) as helper:
        ok = helper.stop()
    _finish(ok)


@main.command()
def status(
    ctx: typer.Context,
    wait: float = typer.Option(1.0, help="Seconds to listen for a status message"),
) -> None:
    """Report whether the simulation is running."""
    with vrep_session(ctx.obj) as helper:
        deadline = time.monotonic() + wait
        running = helper.is_running()
        while not running and time.monotonic() < deadline:
            time.sleep(0.05)
            running = helper.is_running()
    typer.echo("running" if running else "stopped")


@main.command()
def handle(ctx: typer.Context, name: str = typer.Argument(..., help="Object name")) -> None:
    """Print the handle of a named object."""
    with vrep_session(ctx.obj) as helper:
        object_handle = helper.get_handle(name)
    typer.echo(str(object_handle))
    if object_handle == -1:
        raise typer.Exit(code=1)


@main.command()
def move(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Object name or handle"),
    x: float = typer.Argument(...),
    y: float = typer.Argument(...),
    z: float = typer.Argument(...),
) -> None:
    """Move an object to an absolute position."""
    with vrep_session(ctx.obj) as helper:
        ok = helper.move_object(_parse_target(target), x, y, z)
    _finish(ok)


@main.command()
def copy(ctx: typer.Context, object_handle: int = typer.Argument(..., help="Handle to copy")) -> None:
    """Copy an object and print the new handle."""
    with vrep_session(ctx.obj) as helper:
        new_handle = helper.copy_object(object_handle)
    typer.echo(str(new_handle))
    if new_handle == -1:
        raise typer.Exit(code=1)


@main.command()
def pose(ctx: typer.Context, object_handle: int = typer.Argument(..., help="Object handle")) -> None:
    """Print the absolute pose of an object."""
    with vrep_session(ctx.obj) as helper:
        object_pose = helper.get_pose(object_handle)
    if object_pose is None:
        _finish(False)
    typer.echo(str(object_pose))


@main.command()
def load_scene(ctx: typer.Context, path: Path = typer.Argument(..., help="Scene file (.ttt)")) -> None:
    """Load a scene from an absolute path."""
    with vrep_session(ctx.obj) as helper:
        ok = helper.load_scene(path.resolve())
    _finish(ok)


@main.command()
def load_problem(
    ctx: typer.Context,
    problem: str = typer.Argument(..., help="Problem directory name"),
    relative_path: str = typer.Argument(..., help="Scene path inside the problem directory"),
    package: Optional[str] = typer.Option(None, help="ROS package holding the problems"),  # noqa: UP045
) -> None:
    """Load a scene from <package>/problems/<problem>/<relative_path>."""
    with vrep_session(ctx.obj) as helper:
        ok = helper.load_problem_scene(problem, relative_path, package)
    _finish(ok)


if __name__ == "__main__":
    main()
