"""
Shared Rich console and theme for the datadict CLI.
"""
from rich.console import Console
from rich.theme import Theme

custom_theme = Theme({
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
    "muted": "dim",
    "table.header": "bold blue",
    # Dictionary output
    "variable": "bold white",
    "vtype": "cyan",
    "unit": "magenta",
    "flagged": "bold yellow",
    "skipped": "dim yellow",
})

console = Console(theme=custom_theme, highlight=False)
