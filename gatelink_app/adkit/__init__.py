"""
Page-side components embedded in the gate pages: the ad content loader
and the ad-blocker detector. Both run on an asyncio loop against a
``DomHost`` supplied by the embedding.

The server does not run them. ``gatelink_app.views.pages`` renders the
``#ad-banner`` and ``#social-bar`` containers on every gate page; a
browser-hosted Python runtime (Pyodide, for example) implements
``DomHost`` over the page and on load calls ``BlockerDetector.run``,
``AdLoader.load_banner`` with ``container_id="ad-banner"`` and
``AdLoader.load_social_bar`` with ``container_id="social-bar"``. The
test suite drives them the same way through a fake host.
"""

from .blocker import BlockerDetector, DetectionResult
from .dom import DomHost, Element
from .errors import AdLoaderError, ContainerNotFoundError, LoadError, LoadTimeoutError
from .loader import AdLoader, BannerOptions

__all__ = [
    "AdLoader",
    "BannerOptions",
    "BlockerDetector",
    "DetectionResult",
    "DomHost",
    "Element",
    "AdLoaderError",
    "ContainerNotFoundError",
    "LoadError",
    "LoadTimeoutError",
]
