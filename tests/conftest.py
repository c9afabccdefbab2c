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

import pytest

import ksvc_compiler.config.defaults as defaults_mod
from ksvc_compiler.config.settings import reload_settings_cache
from ksvc_compiler.models.deployment import DeploymentModel


@pytest.fixture(autouse=True)
def isolated_defaults(monkeypatch, tmp_path):
    """Keep a developer's ~/.ksvc_compiler/defaults.yaml out of the tests."""
    monkeypatch.setenv("KSVC_COMPILER_DEFAULTS", str(tmp_path / "no-defaults.yaml"))
    monkeypatch.setattr(defaults_mod, "_DEFAULT_FILES", ())
    reload_settings_cache()
    defaults_mod.reload_defaults_cache()
    yield
    reload_settings_cache()
    defaults_mod.reload_defaults_cache()


@pytest.fixture
def make_model():
    """Factory for DeploymentModel with the fields of a typical service filled in."""

    def _make(**overrides) -> DeploymentModel:
        fields = {
            "name": "svc1",
            "namespace": "ns1",
            "labels": {"team": "ml"},
            "image": "img:v1",
            "container_port": 8080,
            "cpu_requests": "500m",
            "memory_requests": "2Gi",
            "min_replicas": 1,
            "max_replicas": 5,
            "autoscaling_metric": "cpu",
            "autoscaling_target": "80",
        }
        fields.update(overrides)
        return DeploymentModel(**fields)

    return _make
