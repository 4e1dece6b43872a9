import re
from pathlib import Path

from ..errors import PageNotFound

SLUG_RE = re.compile(r'[a-z0-9-]+')


class ContentStore:
    """Maps page names to files in the content directory.

    ``home`` is ``home.html``, ``guide/<slug>`` is ``guide-<slug>.md`` and
    ``404`` is ``404.html``.
    """

    def __init__(self, content_dir):
        self.content_dir = Path(content_dir)

    def path_for(self, name):
        if name == 'home':
            filename = 'home.html'
        elif name == '404':
            filename = '404.html'
        elif name.startswith('guide/'):
            slug = name[len('guide/'):]
            if not SLUG_RE.fullmatch(slug):
                raise PageNotFound(name)
            filename = f'guide-{slug}.md'
        else:
            raise PageNotFound(name)
        return self.content_dir / filename

    def read(self, name):
        path = self.path_for(name)
        if not path.is_file():
            raise PageNotFound(name)
        return path.read_text(encoding='utf-8')

    def home(self):
        return self.read('home')

    def guide(self, slug):
        return self.read(f'guide/{slug}')

    def not_found(self):
        return self.read('404')
