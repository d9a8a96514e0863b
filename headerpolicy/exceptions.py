# headerpolicy/exceptions.py

"""
Custom exception classes for the headerpolicy package.

Only configuration-time problems are represented here: an unknown policy
mode, two rules fighting over the same header, or a rule of a kind the
engine does not know how to apply.

Failures raised by downstream request handlers are never wrapped in these
types. They travel back up the middleware chain untouched.
"""


class PolicyError(Exception):
    """
    Raised when a header policy cannot be assembled.

    Args:
        detail (str): Human-readable description of the problem.

    Example:
        raise PolicyError("Unknown policy mode: 'browser'")
    """
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
