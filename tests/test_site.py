"""
Tests for the guide site: render cache, page renderer, content store and HTTP app.
"""

import threading

import pytest
from fastapi.testclient import TestClient

from vkguide.errors import PageNotFound
from vkguide.site.cache import RenderCache
from vkguide.site.config import SiteConfig
from vkguide.site.content import ContentStore
from vkguide.site.render import PageRenderer
from vkguide.site.server import NOT_FOUND_BODY, create_app


@pytest.fixture
def template_dir(tmp_path):
    templates = tmp_path / 'templates'
    templates.mkdir()
    (templates / 'main.html').write_text('<main>{{ body|safe }}</main>')
    (templates / 'guide.html').write_text('<guide>{{ body|safe }}</guide>')
    return templates


@pytest.fixture
def content_dir(tmp_path):
    content = tmp_path / 'content'
    content.mkdir()
    (content / 'home.html').write_text('<p>Welcome</p>')
    (content / '404.html').write_text('<p>Lost</p>')
    (content / 'guide-introduction.md').write_text('# Introduction\n\nHello *Vulkan*.\n')
    return content


@pytest.fixture
def client(content_dir, template_dir):
    config = SiteConfig(content_dir=content_dir, template_dir=template_dir)
    return TestClient(create_app(config))


class TestRenderCache:

    def test_renders_once_per_key(self):
        cache = RenderCache()
        calls = []

        def render(body):
            calls.append(body)
            return f'<{body}>'

        assert cache.get_or_render('main.html', 'a', render) == '<a>'
        assert cache.get_or_render('main.html', 'a', render) == '<a>'
        assert calls == ['a']
        assert (cache.hits, cache.misses) == (1, 1)

    def test_template_name_is_part_of_key(self):
        cache = RenderCache()
        cache.get_or_render('main.html', 'a', lambda b: 'main')
        assert cache.get_or_render('guide.html', 'a', lambda b: 'guide') == 'guide'
        assert len(cache) == 2

    def test_clear(self):
        cache = RenderCache()
        cache.get_or_render('main.html', 'a', lambda b: 'x')
        cache.clear()
        assert len(cache) == 0
        assert (cache.hits, cache.misses) == (0, 0)

    def test_concurrent_access_renders_once(self):
        cache = RenderCache()
        calls = []

        def render(body):
            calls.append(body)
            return body

        threads = [
            threading.Thread(target=cache.get_or_render, args=('main.html', 'same', render))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert calls == ['same']


class TestPageRenderer:

    def test_main_page(self, template_dir):
        renderer = PageRenderer(template_dir)
        assert renderer.main_page('<b>x</b>') == '<main><b>x</b></main>'

    def test_guide_page_nests_templates(self, template_dir):
        renderer = PageRenderer(template_dir)
        assert renderer.guide_page('x') == '<main><guide>x</guide></main>'

    def test_guide_markdown(self, template_dir):
        renderer = PageRenderer(template_dir)
        html = renderer.guide_markdown('# Title')
        assert html == '<main><guide><h1>Title</h1></guide></main>'

    def test_each_level_rendered_once(self, template_dir):
        cache = RenderCache()
        renderer = PageRenderer(template_dir, cache)
        first = renderer.guide_page('body')
        second = renderer.guide_page('body')
        assert first == second
        assert cache.misses == 2
        assert cache.hits == 2


class TestContentStore:

    def test_home(self, content_dir):
        assert ContentStore(content_dir).home() == '<p>Welcome</p>'

    def test_guide(self, content_dir):
        assert ContentStore(content_dir).guide('introduction').startswith('# Introduction')

    def test_missing_guide(self, content_dir):
        with pytest.raises(PageNotFound) as exc_info:
            ContentStore(content_dir).guide('nope')
        assert exc_info.value.name == 'guide/nope'

    @pytest.mark.parametrize('slug', ['../secret', 'Upper', 'a/b', '', 'dot.md'])
    def test_bad_slugs_rejected(self, content_dir, slug):
        with pytest.raises(PageNotFound):
            ContentStore(content_dir).guide(slug)

    def test_unknown_page(self, content_dir):
        with pytest.raises(PageNotFound):
            ContentStore(content_dir).read('donate')


class TestServer:

    def test_home(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.text == '<main><p>Welcome</p></main>'

    def test_guide_page(self, client):
        response = client.get('/guide/introduction')
        assert response.status_code == 200
        assert response.text.startswith('<main><guide><h1>Introduction</h1>')
        assert '<em>Vulkan</em>' in response.text

    def test_image_chapter(self, client, content_dir):
        (content_dir / 'guide-image-creation.md').write_text('# Image creation\n')
        response = client.get('/guide/image-creation')
        assert response.status_code == 200
        assert '<h1>Image creation</h1>' in response.text

    def test_repeated_requests_hit_cache(self, client):
        first = client.get('/guide/introduction').text
        cache = client.app.state.render_cache
        misses = cache.misses
        second = client.get('/guide/introduction').text
        assert first == second
        assert cache.misses == misses

    def test_missing_guide_is_404(self, client):
        response = client.get('/guide/does-not-exist')
        assert response.status_code == 404
        assert response.text == '<main><p>Lost</p></main>'

    def test_unknown_route_is_404(self, client):
        response = client.get('/no/such/page')
        assert response.status_code == 404
        assert response.text == '<main><p>Lost</p></main>'

    def test_builtin_404_without_content(self, content_dir, template_dir):
        (content_dir / '404.html').unlink()
        client = TestClient(create_app(SiteConfig(content_dir=content_dir, template_dir=template_dir)))
        response = client.get('/guide/missing')
        assert response.status_code == 404
        assert response.text == f'<main>{NOT_FOUND_BODY}</main>'

    def test_gzip(self, content_dir, template_dir):
        (content_dir / 'home.html').write_text('<p>' + 'x' * 2000 + '</p>')
        client = TestClient(create_app(SiteConfig(content_dir=content_dir, template_dir=template_dir)))
        response = client.get('/', headers={'Accept-Encoding': 'gzip'})
        assert response.headers['content-encoding'] == 'gzip'

    def test_gzip_disabled(self, content_dir, template_dir):
        (content_dir / 'home.html').write_text('<p>' + 'x' * 2000 + '</p>')
        config = SiteConfig(content_dir=content_dir, template_dir=template_dir, gzip=False)
        response = TestClient(create_app(config)).get('/', headers={'Accept-Encoding': 'gzip'})
        assert 'content-encoding' not in response.headers
