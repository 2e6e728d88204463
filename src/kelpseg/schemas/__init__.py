"""Pydantic configuration schemas for kelpseg.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from kelpseg.schemas.resolve import resolve_config
from kelpseg.schemas.internal import InternalConfig
from kelpseg.schemas.param import ParamConfig
from kelpseg.schemas.user import UserConfig
from kelpseg.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
