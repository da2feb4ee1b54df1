import os
import sys
import socket
from pipeshell.history import BUILTIN, PIPELINE, init_readline, load_history, record, save_history
from pipeshell.builtin import execute_builtin, current_user
from pipeshell.parser import tokenize
from pipeshell.executor import launch
from pipeshell.results import Result


def prompt():
    """Generate shell prompt: user@host:cwd$"""
    try:
        cwd = os.getcwd()
    except OSError:
        cwd = "?"
    return f"\x1b[32;1m{current_user()}@{socket.gethostname()}\x1b[0m:\x1b[36;1m{cwd}\x1b[0m$ "


def run_line(line):
    """
    Run one command line.
    Returns: (keep_running: bool, status)
    """
    args = tokenize(line)
    if not args:
        return True, Result.SUCCESS

    executed, keep_running = execute_builtin(args)
    if executed:
        record(line, BUILTIN)
        return keep_running, Result.SUCCESS

    record(line, PIPELINE)
    status = launch(args)
    if status != Result.SUCCESS:
        print(f"minishell: exit status {status}", file=sys.stderr)
    return True, status


def main_loop():
    """Main shell loop"""
    init_readline()
    load_history()

    try:
        while True:
            try:
                line = input(prompt())
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

            keep_running, _ = run_line(line)
            if not keep_running:
                break
    finally:
        save_history()
        print("Goodbye!")
