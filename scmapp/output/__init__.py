# scmapp Output Module
# Rich console output for command results

from scmapp.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
