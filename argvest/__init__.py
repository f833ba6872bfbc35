__title__ = 'argvest'
__license__ = 'MIT'
__version__ = "0.1.0"

import logging

from .faults import *
from .model import *
from .parsing import *
from .rendering import *
from .schema import *
from .vester import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

# The library never configures logging; hosts attach their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the schema
__all__ += schema.__all__  # type: ignore[attr-defined]
# Load the exposed API of the model
__all__ += model.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parsing.__all__  # type: ignore[attr-defined]
# Load the exposed API of the renderer
__all__ += rendering.__all__  # type: ignore[attr-defined]
# Load the exposed API of the harvester
__all__ += vester.__all__  # type: ignore[attr-defined]
