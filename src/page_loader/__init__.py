from page_loader.core.config import LoaderSettings
from page_loader.core.errors import PageLoaderError
from page_loader.core.loader import PageLoader, load, load_sync

__all__ = ["LoaderSettings", "PageLoader", "PageLoaderError", "load", "load_sync"]
__version__ = "1.0.0"
