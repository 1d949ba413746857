class InvalidInput(ValueError):
    """Malformed or mismatched sweep arguments. Caller error, never retried."""


class EmptyTestSet(ValueError):
    """The test dataset has no instances, so a misclassification rate is undefined."""


class SweepCancelled(RuntimeError):
    """
    Raised when a sweep is cancelled through its cancel event.

    Attributes:
        partial_result: SweepResult with the candidates whose trials all finished
            before cancellation, in candidate order
    """

    def __init__(self, message: str, partial_result):
        super().__init__(message)
        self.partial_result = partial_result
