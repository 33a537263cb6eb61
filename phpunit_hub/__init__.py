"""PHPUnit Hub - discover, run and watch PHPUnit tests from one process."""

from .config import HubConfig
from .context import HubContext

__version__ = "0.1.0"

__all__ = ["HubConfig", "HubContext", "__version__"]
