# minishell

A small interactive shell for POSIX systems. It reads command lines, expands
variables, splits them into pipelines and runs them, either as builtins or as
external programs found on `PATH`.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running

```
minishell
```

The prompt shows the current directory (with `~` for a path inside `$HOME`),
the value of `$USER`, and `#` when `$USER` begins with `root`, `$` otherwise.
End the session with Ctrl-D or the `exit` builtin. SIGQUIT is ignored while
the shell waits for input; Ctrl-C abandons the current line and sets the
status to 130.

History is kept in `~/.minishell_history`. It is read at start-up and every
non-empty line typed is appended to it (and to the line-editing history when
the `readline` module is available).

## What it understands

- Words, single quotes and double quotes; `$NAME` and `$?` are expanded
  outside single quotes. A `$` followed by a character that cannot start a
  name is kept as typed.
- Pipelines with `|`. A pipe at the start or end of a line, two pipes in a
  row, or a redirection without a target is a syntax error (status 2).
- Redirections: `<` input, `>` truncate, `>>` append, and `<<` here-documents.
  Here-document bodies are read with the prompt `> ` and stored in
  `/tmp/minishell_heredoc<N>`; their lines are expanded unless the word after
  the line's first redirection was quoted.
- Builtins: `echo` (with `-n`, `-nn`, ...), `cd`, `pwd`, `export`, `unset`,
  `env`, `exit`. A builtin alone on a line runs in the shell itself; inside a
  pipeline it runs on a copy of the shell's state, so `cd`, `export` or `exit`
  there change nothing.

The exit status of the last command in a pipeline becomes `$?`. A command
ended by a signal gives 128 plus the signal number; a command that cannot be
found or run gives 127.

## Using it from Python

The pieces can be used on their own:

```python
from minishell.env import Environment
from minishell.parser import parse_line
from minishell.commands import build_commands
from minishell.shell import Shell

env = Environment.from_envp(["HOME=/home/demo", "USER=demo"])
nodes = parse_line("echo $USER | cat", env, 0)
commands = build_commands(nodes)
print([command.argv for command in commands])  # [['echo', 'demo'], ['cat']]

shell = Shell(["PATH=/usr/bin:/bin"], "/tmp/demo_history")
shell.run_line("echo hello > /tmp/out.txt")
```

The modules:

- `minishell.env` — `Environment` and `EnvVar`, the variable store.
- `minishell.expand` — `expand_variables` and its helpers.
- `minishell.tokenizer` — `Tokenizer`, `tokenize`, `TokenType`, `Token`.
- `minishell.parser` — `Parser`, `parse_line`, `Node`, `ParserError`.
- `minishell.commands` — `build_commands`, `Command`, `Redirection`,
  `RedirType`, `CommandSyntaxError`.
- `minishell.heredoc` — `collect_heredoc`, `write_heredoc`,
  `heredoc_filename`, `delimiter_is_quoted`.
- `minishell.builtins` — the builtins, `run_builtin` and `ShellExit`.
- `minishell.executor` — `execute_commands`, `resolve_command` and the
  wait-status helpers.
- `minishell.prompt`, `minishell.history`, `minishell.state`.

`Shell.run_line()` runs one line and returns its status (raising `ShellExit`
for `exit`), `Shell.loop()` runs the interactive loop, and
`minishell.shell.main()` is what the `minishell` command starts.

## What it does not do

This is a small shell, not a full POSIX one. It has no `;`, `&&` or `||`, no
subshells or command grouping, no background jobs or job control, no
wildcard expansion, no backslash escapes and no scripts or `-c` option: it
only reads lines interactively from standard input.