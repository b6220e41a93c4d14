"""
package: mstair.accessors
"""

# <AUTOGEN_INIT>
from mstair.accessors import (
    accessor,
    config,
    errors,
    factory,
    operators,
    owner,
    refs,
    self_storage,
    strategies,
    xlogging,
)


__all__ = [
    "accessor",
    "config",
    "errors",
    "factory",
    "operators",
    "owner",
    "refs",
    "self_storage",
    "strategies",
    "xlogging",
]
# </AUTOGEN_INIT>

__version__ = "0.1.0"
