import os

SHELL_NAME = "minishell"

# History
HISTORY_FILE = os.path.expanduser(os.getenv("MINISHELL_HISTORY", "~/.minishell_history"))
MAX_HISTORY = int(os.getenv("MINISHELL_MAX_HISTORY", "1000"))

# Operators are matched by exact token equality
PIPE_OPERATOR = "|"
REDIRECT_OPERATOR = ">"

TOKEN_DELIMITERS = " \t\r\n\a"
