import os
import re
import sys
from config import PIPE_OPERATOR, REDIRECT_OPERATOR, TOKEN_DELIMITERS
from pipeshell.results import Result

_SPLIT = re.compile("[" + re.escape(TOKEN_DELIMITERS) + "]+")


def tokenize(line):
    """
    Split a command line on whitespace. No quoting: an argument equal to
    an operator is treated as that operator.
    Returns: list of tokens
    """
    return [tok for tok in _SPLIT.split(line) if tok]


def is_operator(token):
    return token in (PIPE_OPERATOR, REDIRECT_OPERATOR)


def find_pipe(tokens, left, right):
    """Index of the first pipe operator in [left, right), or -1."""
    for i in range(left, right):
        if tokens[i] == PIPE_OPERATOR:
            return i
    return -1


def split_redirect(tokens, left, right):
    """
    Look for the output redirection inside a pipe-free range.
    Returns: (result, end, target)
      end    -- index where the command arguments stop
      target -- redirect file name, or None
    """
    count, target, end = 0, None, right

    for i in range(left, right):
        if tokens[i] != REDIRECT_OPERATOR:
            continue
        count += 1
        if i + 1 >= right:
            print("minishell: missing redirect file parameter", file=sys.stderr)
            return Result.MISSING_PARAMETER, end, None
        target = os.path.expanduser(tokens[i + 1])
        if end == right:
            end = i

    if count > 1:
        print(f"minishell: too many redirection symbols '{REDIRECT_OPERATOR}'", file=sys.stderr)
        return Result.TOO_MANY_REDIRECTIONS, end, None

    return Result.SUCCESS, end, target
