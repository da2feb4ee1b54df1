import os
import sys
import tempfile
import traceback
import subprocess
from pipeshell.parser import find_pipe, is_operator, split_redirect
from pipeshell.results import Result

READ_CHUNK = 65536


def run_external(args, stdout=None):
    """
    Start an external program, searching PATH for args[0].
    stdout: None (inherit), a file descriptor or a file object.
    Returns: (result, Popen object or None)
    """
    try:
        return Result.SUCCESS, subprocess.Popen(args, stdout=stdout)
    except FileNotFoundError as e:
        print(f"minishell: command not found: {args[0]}", file=sys.stderr)
        return e.errno, None
    except PermissionError as e:
        print(f"minishell: permission denied: {args[0]}", file=sys.stderr)
        return e.errno, None
    except OSError as e:
        # No filename means the process itself could not be created
        if e.filename is None:
            print(f"minishell: fork function failed: {e.strerror}", file=sys.stderr)
            return Result.FORK_FAILED, None
        print(f"minishell: failed to execute '{args[0]}': {e.strerror}", file=sys.stderr)
        return e.errno, None


def wait_segment(proc):
    """
    Wait for a segment's process and report a failing exit status.
    Returns: Result.SUCCESS or the program's nonzero status
    """
    code = proc.wait()
    if code == 0:
        return Result.SUCCESS

    if code < 0:
        signum = -code
        print(f"minishell: {proc.args[0]}: terminated by signal {signum}", file=sys.stderr)
        return 128 + signum

    print(f"minishell: {proc.args[0]}: process exited with code {code}: {os.strerror(code)}",
          file=sys.stderr)
    return code


def start_segment(tokens, left, right, stdout=None):
    """
    Validate a pipe-free range and start its program without waiting.
    Returns: (result, Popen object or None)
    """
    if left >= right or is_operator(tokens[left]):
        print("minishell: this command does not exist", file=sys.stderr)
        return Result.COMMAND_NOT_FOUND, None

    result, end, target = split_redirect(tokens, left, right)
    if result != Result.SUCCESS:
        return result, None

    args = tokens[left:end]
    if target is None:
        return run_external(args, stdout=stdout)

    try:
        out_f = open(target, "wb")
    except OSError as e:
        print(f"minishell: {target}: {e.strerror}", file=sys.stderr)
        return e.errno, None

    # The child holds its own copy of the descriptor
    with out_f:
        return run_external(args, stdout=out_f)


def execute_segment(tokens, left, right, stdout=None):
    """
    Run one pipe-free command with at most one output redirection.
    Returns: result code
    """
    result, proc = start_segment(tokens, left, right, stdout=stdout)
    if proc is None:
        return result
    return wait_segment(proc)


def _drain(fd, spool):
    """Copy everything readable from fd into spool until end of file."""
    while True:
        chunk = os.read(fd, READ_CHUNK)
        if not chunk:
            break
        spool.write(chunk)
    spool.flush()
    spool.seek(0)


def resolve_pipeline(tokens, left, right):
    """
    Resolve the token range [left, right), which may contain pipes.

    The segment before the first pipe runs with its output going into an
    OS pipe. Its output is spooled while it runs, then it is waited on.
    On success the spool becomes standard input (fd 0) for the rest of the
    range, which is resolved recursively. Downstream stages therefore read a
    seekable regular file, not a FIFO. On failure the spooled output is
    printed and the rest of the range never runs.

    Returns: result code of the deepest failure, or Result.SUCCESS
    """
    if left >= right:
        return Result.SUCCESS

    pipe_pos = find_pipe(tokens, left, right)
    if pipe_pos == -1:
        return execute_segment(tokens, left, right)
    if pipe_pos + 1 == right:
        print("minishell: pipe missing parameter", file=sys.stderr)
        return Result.MISSING_PARAMETER

    try:
        spool = tempfile.TemporaryFile()
    except OSError as e:
        print(f"minishell: pipe buffer could not be created: {e.strerror}", file=sys.stderr)
        return Result.PIPE_CREATION_FAILED

    with spool:
        try:
            read_fd, write_fd = os.pipe()
        except OSError as e:
            print(f"minishell: pipe function failed: {e.strerror}", file=sys.stderr)
            return Result.PIPE_CREATION_FAILED

        try:
            try:
                result, proc = start_segment(tokens, left, pipe_pos, stdout=write_fd)
            finally:
                os.close(write_fd)
            _drain(read_fd, spool)
        finally:
            os.close(read_fd)

        if proc is not None:
            result = wait_segment(proc)

        if result != Result.SUCCESS:
            data = spool.read()
            if data:
                sys.stdout.flush()
                sys.stdout.buffer.write(data)
                sys.stdout.flush()
            return result

        os.dup2(spool.fileno(), 0)

    return resolve_pipeline(tokens, pipe_pos + 1, right)


def _run_child(tokens):
    """Body of the launcher's child: resolve with fd 0 and fd 1 preserved."""
    saved_in, saved_out = os.dup(0), os.dup(1)
    try:
        return resolve_pipeline(tokens, 0, len(tokens))
    finally:
        sys.stdout.flush()
        sys.stderr.flush()
        os.dup2(saved_in, 0)
        os.dup2(saved_out, 1)
        os.close(saved_in)
        os.close(saved_out)


def launch(tokens):
    """
    Run a full command line in one top-level child process so that the
    descriptor rewiring done while resolving never reaches the shell.
    Returns: the child's exit status
    """
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        pid = os.fork()
    except OSError as e:
        print(f"minishell: fork function failed: {e.strerror}", file=sys.stderr)
        return Result.FORK_FAILED

    if pid == 0:
        # Reported if resolution never returns
        status = Result.FORK_FAILED
        try:
            status = _run_child(tokens)
        except Exception:
            traceback.print_exc()
        finally:
            sys.stdout.flush()
            sys.stderr.flush()
            os._exit(int(status) & 0xFF)

    _, status = os.waitpid(pid, 0)
    return os.waitstatus_to_exitcode(status)
