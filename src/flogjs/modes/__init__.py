"""Built-in scoring modes.

Import this package to register the default modes.
"""

from flogjs.modes.lang import LangMode  # noqa: F401
from flogjs.modes.react import ReactMode  # noqa: F401
