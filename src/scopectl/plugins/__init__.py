"""Extension layer — metadata and change sources via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus the built-in cargo, manifest and git sources.
"""

from scopectl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
