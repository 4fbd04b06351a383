__title__ = 'argopt'
__license__ = 'MIT'
__version__ = "0.1.0"

from .arguments import *
from .faults import *
from .parser import *
from .tokens import *
from .usage import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
))

version_info = VersionInfo(0, 1, 0, "final", 0)

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tokens
__all__ += tokens.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage formatter
__all__ += usage.__all__  # type: ignore[attr-defined]
