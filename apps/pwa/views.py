"""
PWA views for NACK POS.
"""
import json

from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

from apps.pwa.cache_strategy import ICON_SIZES, CacheRouter


def get_router(request) -> CacheRouter:
    return CacheRouter(
        origin=f"{request.scheme}://{request.get_host()}",
        version=settings.NACK['CACHE_VERSION'],
    )


@require_GET
def manifest_json(request):
    """
    PWA manifest.json
    """
    manifest = {
        "name": "NACK - Gestion de bar et restaurant",
        "short_name": "NACK",
        "description": "Caisse, stock, équipe et billetterie pour bars, restaurants et boîtes de nuit",
        "start_url": "/",
        "display": "standalone",
        "background_color": "#ffffff",
        "theme_color": "#b91c1c",
        "orientation": "portrait",
        "icons": [
            {
                "src": f"/icons/icon-{size}x{size}.png",
                "sizes": f"{size}x{size}",
                "type": "image/png",
                "purpose": "any maskable",
            }
            for size in ICON_SIZES
        ],
        "categories": ["business", "food"],
        "lang": "fr",
        "scope": "/",
        "permissions": ["camera"]
    }

    return JsonResponse(manifest)


SERVICE_WORKER_BODY = """
const STATIC_ASSETS = CONFIG.precache;
const STATIC_CACHE = CONFIG.caches.static;
const HTML_CACHE = CONFIG.caches.html;
const IMAGE_CACHE = CONFIG.caches.image;
const CURRENT_CACHES = [STATIC_CACHE, HTML_CACHE, IMAGE_CACHE];

self.addEventListener('install', (event) => {
  event.waitUntil(
    caches.open(STATIC_CACHE).then((cache) => cache.addAll(STATIC_ASSETS)).then(() => self.skipWaiting())
  );
});

self.addEventListener('activate', (event) => {
  event.waitUntil(
    (async () => {
      const keys = await caches.keys();
      await Promise.all(keys.filter((k) => !CURRENT_CACHES.includes(k)).map((k) => caches.delete(k)));
      await self.clients.claim();
    })()
  );
});

function isNavigationRequest(request) {
  const accept = request.headers.get('accept') || '';
  return request.mode === 'navigate' || (request.method === 'GET' && accept.includes('text/html'));
}

async function networkFirst(request) {
  const cache = await caches.open(HTML_CACHE);
  try {
    const net = await fetch(request);
    cache.put(request, net.clone());
    return net;
  } catch (e) {
    const cached = await cache.match(request);
    return cached || caches.match(CONFIG.shell);
  }
}

async function cacheFirst(request) {
  const cache = await caches.open(IMAGE_CACHE);
  const cached = await cache.match(request);
  if (cached) return cached;
  try {
    const net = await fetch(request);
    cache.put(request, net.clone());
    return net;
  } catch (e) {
    return caches.match(CONFIG.fallbackImage);
  }
}

async function staleWhileRevalidate(request) {
  const cache = await caches.open(STATIC_CACHE);
  const cached = await cache.match(request);
  const network = fetch(request).then((net) => {
    cache.put(request, net.clone());
    return net;
  });
  if (cached) {
    network.catch(() => undefined);
    return cached;
  }
  return network;
}

async function networkWithCacheFallback(request) {
  try {
    return await fetch(request);
  } catch (e) {
    const cached = await caches.match(request);
    if (cached) return cached;
    throw e;
  }
}

self.addEventListener('fetch', (event) => {
  const { request } = event;
  const url = new URL(request.url);

  if (request.method !== 'GET' || url.origin !== self.location.origin) return;

  if (isNavigationRequest(request)) {
    event.respondWith(networkFirst(request));
  } else if (request.destination === 'image' || url.pathname.startsWith(CONFIG.iconsPrefix)) {
    event.respondWith(cacheFirst(request));
  } else if (CONFIG.staticDestinations.includes(request.destination)) {
    event.respondWith(staleWhileRevalidate(request));
  } else {
    event.respondWith(networkWithCacheFallback(request));
  }
});
"""


@never_cache
@require_GET
def service_worker_js(request):
    """
    Service worker generated from the cache routing table.
    """
    config = json.dumps(get_router(request).config(), indent=2)
    content = f"const CONFIG = {config};\n{SERVICE_WORKER_BODY}"

    response = HttpResponse(content, content_type='application/javascript')
    response['Service-Worker-Allowed'] = '/'
    return response
