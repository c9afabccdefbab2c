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

from collections.abc import Mapping

from ksvc_compiler.core.labels import LabelSet
from ksvc_compiler.models.deployment import DeploymentModel
from ksvc_compiler.models.descriptor import ObjectMeta

# https://knative.dev/docs/serving/services/private-services/
VISIBILITY_LABEL_KEY = "networking.knative.dev/visibility"
VISIBILITY_CLUSTER_LOCAL = "cluster-local"


def revision_name(service_name: str) -> str:
    """Name of the (single) revision the compiler generates for a service."""
    return f"{service_name}-0"


def service_labels(labels: Mapping[str, str], is_cluster_local: bool) -> LabelSet:
    label_set = LabelSet(labels)
    if is_cluster_local:
        # Kservice should only be accessible from within the cluster
        label_set = label_set.with_label(VISIBILITY_LABEL_KEY, VISIBILITY_CLUSTER_LOCAL)
    return label_set


def revision_labels(labels: Mapping[str, str]) -> LabelSet:
    """Labels for the revision template.

    The visibility marker is a property of the Service route, so it is never
    copied onto the revision.
    """
    return LabelSet(labels)


def build_service_metadata(model: DeploymentModel) -> ObjectMeta:
    return ObjectMeta(
        name=model.name,
        namespace=model.namespace,
        labels=service_labels(model.labels, model.is_cluster_local).to_dict(),
    )
