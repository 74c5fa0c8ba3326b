"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) plus single-file plugins from a
local directory.
INVARIANT: Plugin failures are warnings, never errors.
"""

from profilectl.plugins.hookspecs import hookimpl
from profilectl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
