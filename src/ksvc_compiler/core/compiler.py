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

import logging

from ksvc_compiler.core.autoscaling import build_autoscaling_annotations
from ksvc_compiler.core.metadata import (
    build_service_metadata,
    revision_labels,
    revision_name,
)
from ksvc_compiler.core.spec import build_revision_template
from ksvc_compiler.helpers.logger import setup_logger
from ksvc_compiler.models.deployment import DeploymentModel
from ksvc_compiler.models.descriptor import KnativeServiceDescriptor, ServiceSpec
from ksvc_compiler.platform.defaults import KnativeDefaulter
from ksvc_compiler.platform.protocols import Defaulter

logger = setup_logger(__name__, level=logging.INFO)


def compile_service(
    model: DeploymentModel, defaulter: Defaulter | None = None
) -> KnativeServiceDescriptor:
    """Compile a deployment model into a Knative Service descriptor.

    The result has the platform defaults already applied (``KnativeDefaulter``
    unless another ``defaulter`` is given), so that submitting it does not
    produce diffs on the next reconciliation. The model is not modified.

    Raises:
        AutoscalingTargetError: the autoscaling target cannot be translated.
    """
    # Translate the scaling policy first: it is the only step that can fail
    annotations = build_autoscaling_annotations(model)

    name = revision_name(model.name)
    descriptor = KnativeServiceDescriptor(
        metadata=build_service_metadata(model),
        spec=ServiceSpec(
            template=build_revision_template(
                model, name, revision_labels(model.labels), annotations
            )
        ),
    )
    logger.debug(
        f"Compiled Knative service [cyan]{model.namespace}/{model.name}[/cyan] "
        f"(revision {name}, metric {model.autoscaling_metric})"
    )

    return (defaulter or KnativeDefaulter()).apply(descriptor)
