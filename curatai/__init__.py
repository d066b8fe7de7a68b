"""CuratAI photo-organization client.

Talks to the CuratAI backend exclusively over HTTP. The ``api`` package holds
the request layer, ``core`` the framework-agnostic application state and
controllers, and ``ui`` the Streamlit front end.
"""

from .config import get_config, AppConfig
from .storage import get_storage, MemoryStorage, PersistentStorage

__version__ = "0.3.0"

__all__ = [
    "get_config",
    "AppConfig",
    "get_storage",
    "MemoryStorage",
    "PersistentStorage",
    "__version__",
]
