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

"""Translation of a (metric, target) scaling policy into Knative annotations.

Knative expects the target as an absolute value in the metric's own unit:
requests in flight for ``concurrency``, requests per second for ``rps``, a
percentage of the CPU request for ``cpu`` and mebibytes for ``memory``. Users
supply the memory target as a percentage of the memory request, like cpu, so
it has to be converted here.
"""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, getcontext, localcontext
import math
import re

from ksvc_compiler.core.resources import compute_resource
from ksvc_compiler.exceptions import TargetParseError, TargetPolicyViolation
from ksvc_compiler.models.deployment import DeploymentModel

AUTOSCALING_CLASS_KPA = "kpa.autoscaling.knative.dev"
AUTOSCALING_CLASS_HPA = "hpa.autoscaling.knative.dev"

MIN_SCALE_ANNOTATION = "autoscaling.knative.dev/minScale"
MAX_SCALE_ANNOTATION = "autoscaling.knative.dev/maxScale"
METRIC_ANNOTATION = "autoscaling.knative.dev/metric"
TARGET_ANNOTATION = "autoscaling.knative.dev/target"
CLASS_ANNOTATION = "autoscaling.knative.dev/class"
INITIAL_SCALE_ANNOTATION = "autoscaling.knative.dev/initial-scale"
QUEUE_PROXY_RESOURCE_PERCENTAGE_ANNOTATION = "queue.sidecar.serving.knative.dev/resourcePercentage"

_MEBIBYTE = 1024**2
_MIN_CONCURRENCY = Decimal("0.01")
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def autoscaling_class_for(metric: str) -> str | None:
    """Knative autoscaler implementation that supports the given metric.

    Returns None for metrics Knative does not know about; the caller should
    then leave the class annotation out and let the platform pick.
    """
    if metric in ("concurrency", "rps"):
        return AUTOSCALING_CLASS_KPA
    if metric in ("cpu", "memory"):
        return AUTOSCALING_CLASS_HPA
    return None


def _parse_target(metric: str, raw_target: str) -> Decimal:
    # Targets must fit a float64
    if not _DECIMAL_RE.fullmatch(raw_target) or not math.isfinite(float(raw_target)):
        raise TargetParseError(metric, raw_target)
    return Decimal(raw_target)


def _format_fixed(value: Decimal, places: int, rounding: str) -> str:
    """Round to ``places`` decimals, never switching to exponent notation."""
    exponent = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = max(getcontext().prec, value.adjusted() + places + 2)
        return f"{value.quantize(exponent, rounding=rounding):f}"


def autoscaling_target(metric: str, raw_target: str, memory_requests: str) -> str:
    """Return the target value in the format Knative expects for ``metric``.

    Raises:
        TargetParseError: the target of a known metric is not a number.
        TargetPolicyViolation: a concurrency target is below 0.01 after rounding.
    """
    # Whole-number targets round ties to even, concurrency rounds them up
    if metric in ("cpu", "rps"):
        return _format_fixed(_parse_target(metric, raw_target), 0, ROUND_HALF_EVEN)

    if metric == "memory":
        percent = _parse_target(metric, raw_target)
        target_bytes = compute_resource(memory_requests, percent / 100)
        return _format_fixed(Decimal(target_bytes) / _MEBIBYTE, 0, ROUND_HALF_EVEN)

    if metric == "concurrency":
        # Knative accepts up to 2 decimal places for concurrency
        value = _format_fixed(_parse_target(metric, raw_target), 2, ROUND_HALF_UP)
        if Decimal(value) < _MIN_CONCURRENCY:
            raise TargetPolicyViolation(
                metric,
                raw_target,
                "concurrency target should be at least 0.01 after rounding to 2 decimal places",
            )
        return value

    # Any other metric is handed to the autoscaler untouched
    return raw_target


def build_autoscaling_annotations(model: DeploymentModel) -> dict[str, str]:
    """Revision annotations carrying the scaling policy of ``model``."""
    annotations = {
        MIN_SCALE_ANNOTATION: str(model.min_replicas),
        MAX_SCALE_ANNOTATION: str(model.max_replicas),
        METRIC_ANNOTATION: model.autoscaling_metric,
        TARGET_ANNOTATION: autoscaling_target(
            model.autoscaling_metric, model.autoscaling_target, model.memory_requests
        ),
    }

    autoscaling_class = autoscaling_class_for(model.autoscaling_metric)
    if autoscaling_class is not None:
        annotations[CLASS_ANNOTATION] = autoscaling_class

    if model.initial_scale is not None:
        annotations[INITIAL_SCALE_ANNOTATION] = str(model.initial_scale)

    if model.queue_proxy_resource_percentage > 0:
        annotations[QUEUE_PROXY_RESOURCE_PERCENTAGE_ANNOTATION] = str(
            model.queue_proxy_resource_percentage
        )

    return annotations
