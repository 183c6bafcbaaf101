"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["calc", "select", "health", "clock", "events", "clear", "exit", "help"]

# Numeric shortcuts matching the classic menu layout
MENU_ALIASES = {
    "1": "calc",
    "2": "select",
    "3": "health",
    "4": "clock",
    "5": "events",
    "0": "exit",
}

STYLE = Style.from_dict(
    {
        "prompt": "#3FA9F5 bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;63;169;245m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
╔══════════════════════════════════════════════════════════════╗
║   DISTRIBUTED CALCULATOR - VECTOR CLOCK                      ║
║   With Causality Tracking & Concurrent Event Detection       ║
╚══════════════════════════════════════════════════════════════╝
{RESET}"""

WELCOME_TITLE = "Distributed Calculator CLI - Vector Clock Causality"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "vclock> "

HELP_TEXT = """Available commands:
  calc <n>                 (1) Sum 1..n across all online servers
  select <ids> <n>         (2) Sum 1..n using the chosen servers (e.g. select 1,3 100)
  health                   (3) Check every server's health
  clock                    (4) Show vector clock state & analysis
  events                   (5) Show event log with causality
  clear                    Clear screen and redisplay welcome message
  help                     Show this help
  exit                     (0) Exit REPL

Numbers in parentheses are menu shortcuts: '1 100' is the same as 'calc 100'.
Examples:
  calc 1000
  select 1,2 500
  events"""

RELATION_LABELS = {
    "before": "→ (Happened Before)",
    "after": "← (Happened After)",
    "concurrent": "|| (Concurrent)",
}
