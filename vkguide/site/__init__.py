__all__ = ['SiteConfig', 'RenderCache', 'PageRenderer', 'ContentStore', 'create_app']

from .config import SiteConfig
from .cache import RenderCache
from .render import PageRenderer
from .content import ContentStore
from .server import create_app
