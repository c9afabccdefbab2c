import json
import logging

import pytest
from typer.testing import CliRunner
import yaml

from ksvc_compiler.cli.main import app
from ksvc_compiler.config.settings import reload_settings_cache
from ksvc_compiler.helpers.logger import set_log_level

runner = CliRunner()


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "svc1.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "name": "svc1",
                "namespace": "ns1",
                "image": "img:v1",
                "container_port": 8080,
                "min_replicas": 1,
                "max_replicas": 5,
                "autoscaling_metric": "cpu",
                "autoscaling_target": "80",
                "is_cluster_local": True,
            }
        )
    )
    return path


def test_cli_version(monkeypatch):
    monkeypatch.setattr("ksvc_compiler.cli.main.get_version", lambda: "1.2.3")

    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "ksvc-compiler CLI Version: 1.2.3" in result.stdout


def test_cli_version_short(monkeypatch):
    monkeypatch.setattr("ksvc_compiler.cli.main.get_version", lambda: "1.2.3")

    result = runner.invoke(app, ["version", "--short"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1.2.3"


def test_cli_compile_prints_yaml_manifest(model_file):
    result = runner.invoke(app, ["compile", "-c", str(model_file)])

    assert result.exit_code == 0, result.output
    manifest = yaml.safe_load(result.stdout)
    assert manifest["kind"] == "Service"
    assert manifest["metadata"]["labels"] == {"networking.knative.dev/visibility": "cluster-local"}
    template = manifest["spec"]["template"]
    assert template["metadata"]["name"] == "svc1-0"
    assert template["metadata"]["annotations"]["autoscaling.knative.dev/class"] == (
        "hpa.autoscaling.knative.dev"
    )


def test_cli_compile_json(model_file):
    result = runner.invoke(app, ["compile", "-c", str(model_file), "-o", "json"])

    assert result.exit_code == 0, result.output
    manifest = json.loads(result.stdout)
    assert manifest["spec"]["template"]["metadata"]["annotations"][
        "autoscaling.knative.dev/target"
    ] == "80"


def test_cli_compile_output_format_from_settings(model_file, monkeypatch):
    monkeypatch.setenv("KSVC_COMPILER_OUTPUT_FORMAT", "json")
    reload_settings_cache()

    result = runner.invoke(app, ["compile", "-c", str(model_file)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["metadata"]["name"] == "svc1"


def test_cli_compile_rejects_unknown_format(model_file):
    result = runner.invoke(app, ["compile", "-c", str(model_file), "-o", "toml"])
    assert result.exit_code != 0


def test_cli_compile_fails_on_bad_target(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "name": "svc1",
                "namespace": "ns1",
                "image": "img:v1",
                "autoscaling_metric": "concurrency",
                "autoscaling_target": "0.001",
            }
        )
    )

    result = runner.invoke(app, ["compile", "-c", str(path)])

    assert result.exit_code == 1


def test_cli_compile_fails_on_invalid_model(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump({"name": "svc1", "min_replicas": 3, "max_replicas": 1}))

    result = runner.invoke(app, ["compile", "-c", str(path)])

    assert result.exit_code == 1


@pytest.fixture
def restore_log_level():
    yield
    set_log_level(logging.INFO)


def test_cli_applies_log_level_from_settings(model_file, monkeypatch, restore_log_level):
    monkeypatch.setenv("KSVC_COMPILER_LOG_LEVEL", "debug")
    reload_settings_cache()

    result = runner.invoke(app, ["compile", "-c", str(model_file)])

    assert result.exit_code == 0, result.output
    assert logging.getLogger("ksvc_compiler.core.compiler").level == logging.DEBUG
    assert logging.getLogger("ksvc_compiler.cli").level == logging.DEBUG


def test_cli_compile_fails_on_out_of_range_target(tmp_path):
    path = tmp_path / "huge.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "name": "svc1",
                "namespace": "ns1",
                "image": "img:v1",
                "autoscaling_metric": "cpu",
                "autoscaling_target": "1e1000000",
            }
        )
    )

    result = runner.invoke(app, ["compile", "-c", str(path)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ArithmeticError)
