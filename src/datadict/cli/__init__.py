"""
datadict CLI - shared console and commands.
"""
import logging

import click

from datadict.cli.console import console, custom_theme
from datadict.cli.profile import profile_command, display_dictionary

logging.basicConfig(level=logging.WARNING)


@click.group()
def cli():
    """datadict - infer a data dictionary from tabular files"""
    pass


cli.add_command(profile_command)

__all__ = [
    'cli',
    'console',
    'custom_theme',
    'profile_command',
    'display_dictionary',
]
