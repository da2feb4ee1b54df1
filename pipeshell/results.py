from enum import IntEnum


class Result(IntEnum):
    """
    Outcome of resolving a command line. Zero is success; every other value
    is a failure. Besides these kinds, the engine passes through the exit
    status of an external program or the errno of a failed exec unchanged.
    """
    SUCCESS = 0
    FORK_FAILED = 2
    COMMAND_NOT_FOUND = 3
    MISSING_PARAMETER = 4
    WRONG_PARAMETER = 5
    TOO_MANY_REDIRECTIONS = 6
    FILE_NOT_FOUND = 7
    PIPE_CREATION_FAILED = 8
