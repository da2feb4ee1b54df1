import os
import sys
import socket
import psutil
from config import SHELL_NAME
from pipeshell.history import BUILTIN, PIPELINE, show_history
from pipeshell.results import Result

CLEAR_SCREEN = "\x1b[2J\x1b[H"


def current_user():
    """Name of the user running the shell"""
    try:
        return psutil.Process().username()
    except (psutil.Error, KeyError):
        return os.getenv("USER") or os.getenv("USERNAME") or "user"


def builtin_help(args):
    """Print help message"""
    print("""MiniShell help:
 Type program names and arguments, and hit enter.
 Built-in commands:
  cd <dir>                 : change directory
  exit                     : exit shell
  help                     : print this help
  pwd                      : print current directory
  grep -c <pattern> <file> : count pattern matches in a file
  info                     : shell and process information
  clear                    : clear the screen
  history [-b|-p]          : show command history (builtins or pipelines only)

Features:
  Pipes using |
  Output redirection using >
 Use the man command for information on other programs.
""")
    return True


def builtin_cd(args):
    """Change directory"""
    if not args:
        print('minishell: expected argument to "cd"', file=sys.stderr)
        return True
    try:
        os.chdir(os.path.expanduser(args[0]))
    except OSError as e:
        print(f"cd: {e}", file=sys.stderr)
    return True


def builtin_exit(args):
    return False


def builtin_pwd(args):
    """Print working directory"""
    try:
        print(os.getcwd())
    except OSError as e:
        print(f"pwd: {e}", file=sys.stderr)
    return True


def count_occurrences(text, pattern):
    """Number of positions where pattern starts in text (overlapping)."""
    if not pattern:
        return 0
    found, start = 0, text.find(pattern)
    while start != -1:
        found += 1
        start = text.find(pattern, start + 1)
    return found


def grep_count(args):
    """
    grep -c <pattern> <file>
    Returns: (result, count)
    """
    if len(args) < 3:
        print("grep: usage: grep -c <pattern> <file>", file=sys.stderr)
        return Result.MISSING_PARAMETER, 0
    if args[0] != "-c":
        print("grep: wrong parameter", file=sys.stderr)
        return Result.WRONG_PARAMETER, 0

    pattern, path = args[1], os.path.expanduser(args[2])
    try:
        with open(path, "r", errors="replace") as f:
            text = f.read()
    except OSError:
        print(f"grep: file does not exist: {path}", file=sys.stderr)
        return Result.FILE_NOT_FOUND, 0

    return Result.SUCCESS, count_occurrences(text, pattern)


def builtin_grep(args):
    result, found = grep_count(args)
    if result == Result.SUCCESS:
        print(f"There are {found} times of the file that satisfies the pattern match.")
    return True


def builtin_info(args):
    """Shell banner plus a few facts about the running process"""
    proc = psutil.Process()
    print(f"{SHELL_NAME}: simplified shell by {current_user()}")
    print(f"  host : {socket.gethostname()}")
    print(f"  pid  : {proc.pid} (parent {proc.ppid()})")
    try:
        print(f"  mem  : {round(proc.memory_info().rss / (1024 * 1024), 2)} MB")
    except psutil.Error:
        pass
    return True


def builtin_clear(args):
    sys.stdout.write(CLEAR_SCREEN)
    sys.stdout.flush()
    return True


_HISTORY_FLAGS = {"-b": BUILTIN, "-p": PIPELINE}


def builtin_history(args):
    """history [-b|-p]: all lines, builtins only or pipelines only"""
    if not args:
        show_history()
    elif len(args) == 1 and args[0] in _HISTORY_FLAGS:
        show_history(_HISTORY_FLAGS[args[0]])
    else:
        print("history: usage: history [-b|-p]", file=sys.stderr)
    return True


BUILTINS = {
    "cd": builtin_cd,
    "help": builtin_help,
    "exit": builtin_exit,
    "pwd": builtin_pwd,
    "grep": builtin_grep,
    "info": builtin_info,
    "clear": builtin_clear,
    "history": builtin_history,
}


def lookup(name):
    """Handler for a builtin name, or None"""
    return BUILTINS.get(name)


def execute_builtin(args):
    """
    Execute built-in command if args[0] names one.
    Returns (executed: bool, keep_running: bool)
    """
    if not args:
        return False, True

    handler = lookup(args[0])
    if handler is None:
        return False, True
    return True, handler(args[1:])
