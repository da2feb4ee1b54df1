"""
Command history kept by the shell itself.

Each entry remembers whether the line ran as a builtin or went through the
pipeline engine, so `history -b` / `history -p` can list them apart. The
history file stores one "<kind>\t<line>" record per line. readline only
mirrors the lines for arrow-key recall.
"""
import sys
import readline
from config import HISTORY_FILE, MAX_HISTORY

BUILTIN = "builtin"
PIPELINE = "pipeline"
KINDS = (BUILTIN, PIPELINE)

# (kind, line), oldest first
entries = []


def init_readline():
    """Recall is driven by record(), so input() must not add lines itself"""
    readline.set_auto_history(False)
    if sys.stdin.isatty():
        readline.parse_and_bind("set editing-mode emacs")


def record(line, kind, limit=None):
    """
    Remember a command line. Blank lines and an immediate repeat of the
    last entry are not recorded.
    Returns: True if an entry was added
    """
    line = line.strip()
    if not line or kind not in KINDS:
        return False
    if entries and entries[-1] == (kind, line):
        return False

    entries.append((kind, line))
    readline.add_history(line)

    limit = MAX_HISTORY if limit is None else limit
    while len(entries) > limit:
        entries.pop(0)
        readline.remove_history_item(0)
    return True


def clear_history():
    entries.clear()
    readline.clear_history()


def save_history(path=HISTORY_FILE):
    try:
        with open(path, "w") as f:
            for kind, line in entries[-MAX_HISTORY:]:
                f.write(f"{kind}\t{line}\n")
    except OSError as e:
        print(f"minishell: could not save history to {path}: {e.strerror}", file=sys.stderr)


def load_history(path=HISTORY_FILE):
    """Append records from path; malformed records are skipped"""
    try:
        with open(path, "r", errors="replace") as f:
            for raw in f:
                kind, sep, line = raw.rstrip("\n").partition("\t")
                if sep:
                    record(line, kind)
    except FileNotFoundError:
        pass
    except OSError as e:
        print(f"minishell: could not load history from {path}: {e.strerror}", file=sys.stderr)


def show_history(kind=None):
    """Print entries numbered by position; kind narrows the listing"""
    for i, (entry_kind, line) in enumerate(entries, 1):
        if kind is None or entry_kind == kind:
            print(f"{i}\t{line}")
