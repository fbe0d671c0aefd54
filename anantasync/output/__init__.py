# Ananta Sync Output Module
# Rich console output

from anantasync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
