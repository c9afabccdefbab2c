"""Custom exceptions."""


class KsvcCompilerError(Exception):
    """Base class for all custom exceptions.

    Useful to catch all of them.
    """


class AutoscalingTargetError(KsvcCompilerError):
    """The autoscaling target could not be translated for the given metric."""

    def __init__(self, metric: str, raw_target: str, reason: str):
        """Raise the AutoscalingTargetError.

        Args:
            metric (str): Autoscaling metric the target was supplied for.
            raw_target (str): Target value as supplied by the user.
            reason (str): Human readable description of the failure.
        """
        self.metric = metric
        self.raw_target = raw_target
        super().__init__(reason)


class TargetParseError(AutoscalingTargetError):
    """The raw autoscaling target is not a valid decimal number."""

    def __init__(self, metric: str, raw_target: str):
        msg = f"Autoscaling target {raw_target!r} for metric '{metric}' is not a valid number."
        super().__init__(metric, raw_target, msg)


class TargetPolicyViolation(AutoscalingTargetError):
    """The parsed target is syntactically valid but rejected by policy."""

    def __init__(self, metric: str, raw_target: str, detail: str):
        msg = f"Autoscaling target {raw_target!r} for metric '{metric}' is rejected: {detail}"
        super().__init__(metric, raw_target, msg)


class RoutingError(KsvcCompilerError):
    """The router did not produce a usable response."""

    def __init__(self, code: int, message: str):
        """Raise the RoutingError.

        Args:
            code (int): Status code reported by the router, or 502 when
                no valid response came back.
            message (str): Error detail, usually the response payload.
        """
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")
