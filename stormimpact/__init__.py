"""
stormimpact package
===================

Storm impact report built on the NOAA Storm Events dataset.

- The CLI entry point is in `stormimpact/cli.py`.
- The batch pipeline (fetch -> clean -> aggregate -> plot) is in `stormimpact/pipeline.py`.
- Dataset loading is in `stormimpact/loader.py`.
"""

__version__ = '0.1.0'
