__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'helmsman'
__author__ = 'Helmsman contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .arguments import *
from .binding import *
from .cli import *
from .commands import *
from .faults import *
from .options import *
from .routing import *
from . import signatures, usage, values

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

# Tracing stays silent until the application configures logging.
__import__("logging").getLogger(__name__).addHandler(__import__("logging").NullHandler())

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the descriptors
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the positional binder
__all__ += binding.__all__  # type: ignore[attr-defined]
# Load the exposed API of the application layer
__all__ += cli.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the option registry
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the router
__all__ += routing.__all__  # type: ignore[attr-defined]
# Grammar, conversion and rendering stay namespaced
__all__ += ("signatures", "usage", "values")
