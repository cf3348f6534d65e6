"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["stat", "ls", "locate", "mkdir", "rm", "mv", "cat", "put", "cd", "pwd", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E86C1 bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;134;193m"
YELLOW = "\033[33m"
RESET = "\033[0m"

WELCOME_TITLE = f"{BLUE}Overlay CLI{RESET} - cache overlay over a distributed filesystem"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "overlay> "

CAT_MAX_BYTES = 64 * 1024

HELP_TEXT = """Available commands:
  stat <path>                         Show overlay status (attaches a cache entry to new files)
  ls [path]                           List a directory (default: working directory)
  locate <path> [start length]        Show block locations (cache replicas first)
  mkdir <path>                        Create a directory
  rm [-r] <path>                      Delete a file or directory
  mv <src> <dst>                      Rename a path
  cat <path>                          Print a file (first 64 KiB)
  put <local_path> <remote_path>      Upload a local file (remote path must be under the staging prefix)
  cd [path]                           Change working directory (default: /)
  pwd                                 Print working directory
  clear                               Clear screen
  help                                Show this help
  exit                                Exit REPL

Paths may carry a cache entry id suffix, e.g. /data/a.csv%42.
Examples:
  ls /data
  stat /data/a.csv
  locate /data/a.csv%42
  put ./part-00000 /tmp/staging/part-00000
  rm -r /tmp/staging/job1"""
