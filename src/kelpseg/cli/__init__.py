"""Command-line interface modules for kelp indicator execution.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from kelpseg.cli.run_indicators import run_kelp_indicators

__all__ = ['run_kelp_indicators']
