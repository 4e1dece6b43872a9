import hashlib
import logging
import threading

logger = logging.getLogger(__name__)


class RenderCache:
    """Rendered HTML keyed by template name and the body that went into it.

    Request handlers run on a thread pool, so every access holds the lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(template_name, body):
        return template_name, hashlib.sha256(body.encode('utf-8')).hexdigest()

    def get_or_render(self, template_name, body, render):
        key = self.key(template_name, body)
        with self._lock:
            html = self._entries.get(key)
            if html is not None:
                self.hits += 1
                return html
            self.misses += 1
            logger.debug('Cache miss for %s (%s)', template_name, key[1][:12])
            # rendering under the lock keeps each page rendered exactly once
            html = render(body)
            self._entries[key] = html
            return html

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def clear(self):
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
