"""
Cache routing for the service worker.

The service worker served at /sw.js applies, per fetch, the route chosen
here. The Python side is the reference: the JavaScript is generated from
`CacheRouter.config()` and mirrors `CacheRouter.classify`.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlsplit

ICON_SIZES = (72, 96, 128, 144, 152, 192, 384, 512)
SHELL_PAGE = '/index.html'
FALLBACK_IMAGE = '/favicon.png'
ICONS_PREFIX = '/icons/'


class Strategy(str, Enum):
    NETWORK_FIRST = 'network-first'
    CACHE_FIRST = 'cache-first'
    STALE_WHILE_REVALIDATE = 'stale-while-revalidate'
    NETWORK_WITH_CACHE_FALLBACK = 'network-with-cache-fallback'
    PASSTHROUGH = 'passthrough'


@dataclass(frozen=True)
class FetchRequest:
    """The parts of a browser Request the router looks at."""
    url: str
    method: str = 'GET'
    mode: str = ''
    destination: str = ''
    accept: str = ''

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or '/'

    @property
    def is_navigation(self) -> bool:
        return self.mode == 'navigate' or (self.method == 'GET' and 'text/html' in (self.accept or ''))


@dataclass(frozen=True)
class Route:
    strategy: Strategy
    cache_name: Optional[str] = None
    fallback: Optional[str] = None


@dataclass
class CacheRouter:
    origin: str
    version: str = 'v2'
    prefix: str = 'nack'
    precache_extra: List[str] = field(default_factory=list)

    @property
    def static_cache(self) -> str:
        return f"{self.prefix}-static-{self.version}"

    @property
    def html_cache(self) -> str:
        return f"{self.prefix}-html-{self.version}"

    @property
    def image_cache(self) -> str:
        return f"{self.prefix}-img-{self.version}"

    @property
    def cache_names(self) -> List[str]:
        return [self.static_cache, self.html_cache, self.image_cache]

    @property
    def precache(self) -> List[str]:
        assets = ['/', SHELL_PAGE, '/manifest.json', FALLBACK_IMAGE]
        assets += [f"{ICONS_PREFIX}icon-{size}x{size}.png" for size in ICON_SIZES]
        return assets + [asset for asset in self.precache_extra if asset not in assets]

    def is_same_origin(self, url: str) -> bool:
        parts = urlsplit(url)
        if not parts.scheme and not parts.netloc:
            return True
        origin = urlsplit(self.origin)
        return (parts.scheme, parts.netloc) == (origin.scheme, origin.netloc)

    def classify(self, request: FetchRequest) -> Route:
        """
        Pick the caching route for a request.

        Only same-origin GET requests are handled; anything else goes to the
        network untouched. Navigations are network-first with the shell page
        as last resort, images and icons cache-first with the favicon as
        fallback, scripts, styles and fonts stale-while-revalidate, and the
        rest network with a cache fallback.
        """
        if request.method != 'GET' or not self.is_same_origin(request.url):
            return Route(Strategy.PASSTHROUGH)
        if request.is_navigation:
            return Route(Strategy.NETWORK_FIRST, self.html_cache, SHELL_PAGE)
        if request.destination == 'image' or request.path.startswith(ICONS_PREFIX):
            return Route(Strategy.CACHE_FIRST, self.image_cache, FALLBACK_IMAGE)
        if request.destination in ('script', 'style', 'font'):
            return Route(Strategy.STALE_WHILE_REVALIDATE, self.static_cache)
        return Route(Strategy.NETWORK_WITH_CACHE_FALLBACK)

    def stale_caches(self, existing: Iterable[str]) -> List[str]:
        """Caches to delete on activation: everything not in the current version."""
        current = set(self.cache_names)
        return [name for name in existing if name not in current]

    def config(self) -> Dict[str, object]:
        return {
            'version': self.version,
            'caches': {
                'static': self.static_cache,
                'html': self.html_cache,
                'image': self.image_cache,
            },
            'precache': self.precache,
            'shell': SHELL_PAGE,
            'fallbackImage': FALLBACK_IMAGE,
            'iconsPrefix': ICONS_PREFIX,
            'staticDestinations': ['script', 'style', 'font'],
        }
