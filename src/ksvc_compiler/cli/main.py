# Copyright 2025 Domyn
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

import json
import logging
from typing import Annotated, Optional

from pydantic import ValidationError
from rich.console import Console
import typer
import yaml

from ..config.settings import get_settings
from ..core.compiler import compile_service
from ..exceptions import KsvcCompilerError
from ..helpers.logger import set_log_level, setup_logger
from ..models.deployment import load_deployment_model
from ..utils.version import get_version

app = typer.Typer(name="ksvc-compiler CLI", no_args_is_help=True)

console = Console()
logger = setup_logger("ksvc_compiler.cli", level=logging.INFO, console=console)

_FORMATS = ("yaml", "json")


@app.callback()
def main():
    """Compile deployment models into Knative Service manifests."""
    set_log_level(get_settings().log_level)


@app.command("version", short_help="Show the version of the ksvc-compiler CLI")
def version(short: bool = False):
    v = get_version()
    print(v if short else f"ksvc-compiler CLI Version: {v}")
    raise typer.Exit()


@app.command("compile", short_help="Compile a deployment model into a Knative Service")
def compile_cmd(
    config: Annotated[
        typer.FileText,
        typer.Option(..., "-c", "--config", help="Path to YAML deployment model"),
    ],
    output: Annotated[
        Optional[str],
        typer.Option(
            "-o",
            "--output",
            help="Manifest format, 'yaml' or 'json'. Defaults to KSVC_COMPILER_OUTPUT_FORMAT.",
        ),
    ] = None,
):
    """
    Compile the deployment model in CONFIG and print the Knative Service
    manifest on stdout, ready to be piped into `kubectl apply -f -`.
    """
    fmt = (output or get_settings().output_format).lower()
    if fmt not in _FORMATS:
        raise typer.BadParameter(f"Unsupported output format {fmt!r}, use one of {_FORMATS}")

    try:
        model = load_deployment_model(config)
        descriptor = compile_service(model)
    except (ValidationError, yaml.YAMLError, ValueError) as e:
        logger.error(f"Invalid deployment model {config.name}: {e}")
        raise typer.Exit(code=1)
    except KsvcCompilerError as e:
        logger.error(f"Failed to compile {config.name}: {e}")
        raise typer.Exit(code=1)

    manifest = descriptor.to_manifest()
    if fmt == "json":
        typer.echo(json.dumps(manifest, indent=2))
    else:
        typer.echo(yaml.safe_dump(manifest, sort_keys=False), nl=False)


if __name__ == "__main__":
    app()
