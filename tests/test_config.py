"""
Tests for the site configuration.
"""

import argparse
from pathlib import Path

import pytest

from vkguide.site.config import TEMPLATE_DIR, SiteConfig


def make_args(**kwargs):
    values = dict(config=None, host=None, port=None, content_dir=None, template_dir=None)
    values.update(kwargs)
    return argparse.Namespace(**values)


class TestSiteConfig:

    def test_defaults(self):
        config = SiteConfig()
        assert config.host == '127.0.0.1'
        assert config.port == 8000
        assert config.template_dir == TEMPLATE_DIR
        assert config.gzip

    def test_packaged_templates_exist(self):
        assert (TEMPLATE_DIR / 'main.html').is_file()
        assert (TEMPLATE_DIR / 'guide.html').is_file()

    def test_from_yaml(self, tmp_path):
        path = tmp_path / 'site.yaml'
        path.write_text('port: 9000\ncontent_dir: pages\ngzip: false\n')
        config = SiteConfig.from_yaml(path)
        assert config.port == 9000
        assert config.content_dir == Path('pages')
        assert not config.gzip

    def test_from_yaml_rejects_unknown_keys(self, tmp_path):
        path = tmp_path / 'site.yaml'
        path.write_text('port: 9000\nstatic_dir: static\n')
        with pytest.raises(ValueError, match='static_dir'):
            SiteConfig.from_yaml(path)

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / 'site.yaml'
        path.write_text('')
        assert SiteConfig.from_yaml(path) == SiteConfig()

    def test_from_args_defaults(self):
        assert SiteConfig.from_args(make_args()) == SiteConfig()

    def test_args_override_yaml(self, tmp_path):
        path = tmp_path / 'site.yaml'
        path.write_text('host: 0.0.0.0\nport: 9000\n')
        config = SiteConfig.from_args(make_args(config=str(path), port=8080))
        assert config.host == '0.0.0.0'
        assert config.port == 8080
