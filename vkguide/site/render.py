import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .cache import RenderCache


class PageRenderer:
    """Two-level page rendering: guide template inside the main template."""

    def __init__(self, template_dir, cache=None, markdown_extensions=None):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(['html'])
        )
        self.cache = cache if cache is not None else RenderCache()
        self.markdown_extensions = list(markdown_extensions or [])

    def render_template(self, name, body):
        # body is already HTML, so it goes in unescaped via |safe in the template
        return self.env.get_template(name).render(body=body)

    def main_page(self, body_html):
        return self.cache.get_or_render('main.html', body_html, lambda b: self.render_template('main.html', b))

    def guide_page(self, body_html):
        inner = self.cache.get_or_render('guide.html', body_html, lambda b: self.render_template('guide.html', b))
        return self.main_page(inner)

    def guide_markdown(self, markdown_text):
        return self.guide_page(markdown.markdown(markdown_text, extensions=self.markdown_extensions))
