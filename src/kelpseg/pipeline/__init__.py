"""Pipeline modules.

- runner: Batch runner computing and exporting every indicator table
"""

from kelpseg.pipeline.runner import KelpIndicatorPipeline

__all__ = [
    "KelpIndicatorPipeline",
]
