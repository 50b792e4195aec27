from enum import Enum


class TableErrorKind(str, Enum):
    INCOMPLETE = "incomplete"
    BAD_KEY = "bad_key"
    UNKNOWN_STATE = "unknown_state"
    UNKNOWN_SYMBOL = "unknown_symbol"
    UNKNOWN_TARGET = "unknown_target"
    NOT_A_SUBSET = "not_a_subset"
    EPSILON = "epsilon"


class FsmError(Exception):
    """Base class for engine errors.

    Not a ValueError, so validators raising it surface it unwrapped.
    """


class MalformedTransitionTable(FsmError):
    def __init__(self, kind: TableErrorKind, message: str):
        self.kind = kind
        super().__init__(message)


class EpsilonNotPermitted(MalformedTransitionTable):
    def __init__(self, message: str):
        super().__init__(TableErrorKind.EPSILON, message)


class NullInput(FsmError):
    pass


class InternalConsistencyError(FsmError):
    pass
