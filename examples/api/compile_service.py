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

import yaml

from ksvc_compiler import DeploymentModel, compile_service
from ksvc_compiler.exceptions import AutoscalingTargetError

model = DeploymentModel.read("examples/configs/router.yaml")

try:
    descriptor = compile_service(model)
except AutoscalingTargetError as e:
    raise SystemExit(f"Cannot compile {model.name}: {e}")

print(yaml.safe_dump(descriptor.to_manifest(), sort_keys=False))

# The same model with a memory based policy: 60% of the 1Gi request
memory_model = model.model_copy(
    update={"autoscaling_metric": "memory", "autoscaling_target": "60"}
)
annotations = compile_service(memory_model).spec.template.metadata.annotations
print(annotations["autoscaling.knative.dev/target"])  # 614 (Mi)
