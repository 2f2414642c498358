"""FileFilter Core - Shared constants and validators.

Import specific names from submodules:
    from filefilter.core.constants import ErrorCode, Limits
    from filefilter.core import validators
"""

from filefilter.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
