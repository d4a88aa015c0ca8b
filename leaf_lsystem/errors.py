class LeafError(Exception):
    """Base class for every error raised by leaf_lsystem."""


class InvalidInputError(LeafError, ValueError):
    pass


class RuleSyntaxError(LeafError, ValueError):
    """A single rule could not be compiled. The compiler skips such rules."""

    def __init__(self, text: str, reason: str):
        super().__init__(f"{text!r}: {reason}")
        self.text = text
        self.reason = reason


class ExpansionLimitError(LeafError):
    pass


class StackOverflowError(LeafError):
    pass


class BindingError(LeafError, ValueError):
    pass
