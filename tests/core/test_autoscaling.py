import pytest

from ksvc_compiler.core.autoscaling import (
    AUTOSCALING_CLASS_HPA,
    AUTOSCALING_CLASS_KPA,
    CLASS_ANNOTATION,
    INITIAL_SCALE_ANNOTATION,
    MAX_SCALE_ANNOTATION,
    METRIC_ANNOTATION,
    MIN_SCALE_ANNOTATION,
    QUEUE_PROXY_RESOURCE_PERCENTAGE_ANNOTATION,
    TARGET_ANNOTATION,
    autoscaling_class_for,
    autoscaling_target,
    build_autoscaling_annotations,
)
from ksvc_compiler.exceptions import (
    AutoscalingTargetError,
    TargetParseError,
    TargetPolicyViolation,
)

# --- autoscaling_class_for ----------------------------------------------------


@pytest.mark.parametrize(
    "metric, expected",
    [
        ("concurrency", AUTOSCALING_CLASS_KPA),
        ("rps", AUTOSCALING_CLASS_KPA),
        ("cpu", AUTOSCALING_CLASS_HPA),
        ("memory", AUTOSCALING_CLASS_HPA),
        ("custom-metric", None),
        ("", None),
    ],
)
def test_autoscaling_class_for(metric, expected):
    assert autoscaling_class_for(metric) == expected


def test_class_values_match_knative_vocabulary():
    assert AUTOSCALING_CLASS_KPA == "kpa.autoscaling.knative.dev"
    assert AUTOSCALING_CLASS_HPA == "hpa.autoscaling.knative.dev"


# --- autoscaling_target -------------------------------------------------------


@pytest.mark.parametrize("metric", ["rps", "cpu"])
def test_rps_and_cpu_targets_are_formatted_as_integers(metric):
    assert autoscaling_target(metric, "37.4", "1Gi") == "37"
    assert autoscaling_target(metric, "80", "1Gi") == "80"


@pytest.mark.parametrize(
    "raw, expected",
    [("36.5", "36"), ("37.5", "38"), ("2.5", "2"), ("0.5", "0"), ("36.51", "37"), ("1e2", "100")],
)
@pytest.mark.parametrize("metric", ["rps", "cpu"])
def test_integer_targets_round_ties_to_even(metric, raw, expected):
    assert autoscaling_target(metric, raw, "1Gi") == expected


def test_memory_target_rounds_ties_to_even():
    # 50% of 5Mi is 2.5Mi, 50% of 7Mi is 3.5Mi
    assert autoscaling_target("memory", "50", "5Mi") == "2"
    assert autoscaling_target("memory", "50", "7Mi") == "4"


def test_concurrency_target_keeps_two_decimals():
    assert autoscaling_target("concurrency", "12.345", "1Gi") == "12.35"
    assert autoscaling_target("concurrency", "3", "1Gi") == "3.00"
    assert autoscaling_target("concurrency", "0.005", "1Gi") == "0.01"
    assert autoscaling_target("concurrency", "0.125", "1Gi") == "0.13"


@pytest.mark.parametrize("raw", ["0.001", "0", "0.004", "-0.001", "-0.00", "-5", "-0.01"])
def test_concurrency_target_below_minimum_is_a_policy_violation(raw):
    with pytest.raises(TargetPolicyViolation) as exc:
        autoscaling_target("concurrency", raw, "1Gi")

    assert raw in str(exc.value)
    assert "at least 0.01" in str(exc.value)
    assert exc.value.metric == "concurrency"
    assert exc.value.raw_target == raw


def test_memory_target_is_percentage_of_requests_in_mebibytes():
    assert autoscaling_target("memory", "50", "2Gi") == "1024"
    assert autoscaling_target("memory", "50", "4Gi") == "2048"
    assert autoscaling_target("memory", "33", "1500Mi") == "495"


def test_memory_target_accepts_fractional_percentages():
    # 512Mi * 12.5% = 64Mi
    assert autoscaling_target("memory", "12.5", "512Mi") == "64"


@pytest.mark.parametrize("metric", ["rps", "cpu", "memory", "concurrency"])
@pytest.mark.parametrize(
    "raw", ["abc", "", " 80", "80 ", "NaN", "Inf", "1,5", "12%", "1e400", "-1e400", "1e1000000"]
)
def test_unparsable_targets_raise_parse_error(metric, raw):
    with pytest.raises(TargetParseError) as exc:
        autoscaling_target(metric, raw, "1Gi")

    assert repr(raw) in str(exc.value)
    assert isinstance(exc.value, AutoscalingTargetError)
    assert not isinstance(exc.value, TargetPolicyViolation)


@pytest.mark.parametrize("raw", ["anything goes", "", "0", "-1", "0.001"])
def test_unknown_metric_passes_target_through(raw):
    assert autoscaling_target("custom-metric", raw, "1Gi") == raw


# --- build_autoscaling_annotations --------------------------------------------


def test_annotations_for_cpu(make_model):
    annotations = build_autoscaling_annotations(make_model())

    assert annotations == {
        MIN_SCALE_ANNOTATION: "1",
        MAX_SCALE_ANNOTATION: "5",
        METRIC_ANNOTATION: "cpu",
        TARGET_ANNOTATION: "80",
        CLASS_ANNOTATION: AUTOSCALING_CLASS_HPA,
    }


def test_annotation_keys_match_knative_vocabulary():
    assert MIN_SCALE_ANNOTATION == "autoscaling.knative.dev/minScale"
    assert MAX_SCALE_ANNOTATION == "autoscaling.knative.dev/maxScale"
    assert METRIC_ANNOTATION == "autoscaling.knative.dev/metric"
    assert TARGET_ANNOTATION == "autoscaling.knative.dev/target"
    assert CLASS_ANNOTATION == "autoscaling.knative.dev/class"
    assert INITIAL_SCALE_ANNOTATION == "autoscaling.knative.dev/initial-scale"
    assert (
        QUEUE_PROXY_RESOURCE_PERCENTAGE_ANNOTATION
        == "queue.sidecar.serving.knative.dev/resourcePercentage"
    )


def test_unknown_metric_omits_class_annotation(make_model):
    annotations = build_autoscaling_annotations(
        make_model(autoscaling_metric="custom-metric", autoscaling_target="weird")
    )

    assert CLASS_ANNOTATION not in annotations
    assert annotations[METRIC_ANNOTATION] == "custom-metric"
    assert annotations[TARGET_ANNOTATION] == "weird"


def test_initial_scale_only_when_supplied(make_model):
    assert INITIAL_SCALE_ANNOTATION not in build_autoscaling_annotations(make_model())

    annotations = build_autoscaling_annotations(make_model(initial_scale=0))
    assert annotations[INITIAL_SCALE_ANNOTATION] == "0"


@pytest.mark.parametrize("percentage, present", [(0, False), (-5, False), (20, True)])
def test_queue_proxy_percentage_only_when_positive(make_model, percentage, present):
    annotations = build_autoscaling_annotations(
        make_model(queue_proxy_resource_percentage=percentage)
    )

    assert (QUEUE_PROXY_RESOURCE_PERCENTAGE_ANNOTATION in annotations) is present
    if present:
        assert annotations[QUEUE_PROXY_RESOURCE_PERCENTAGE_ANNOTATION] == "20"


def test_translation_error_propagates(make_model):
    with pytest.raises(TargetParseError):
        build_autoscaling_annotations(make_model(autoscaling_target="eighty"))
