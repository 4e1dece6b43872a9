"""HTTP front end of the guide site.

Usage:
    vkguide-site --content-dir content
    vkguide-site --config site.yaml --port 8080 --log-level debug
"""
import argparse
import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import PageNotFound
from .cache import RenderCache
from .config import SiteConfig
from .content import ContentStore
from .render import PageRenderer

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = '<h1>404</h1><p>This page doesn\'t exist.</p>'


def create_app(config: SiteConfig) -> FastAPI:
    app = FastAPI(title='vkguide', docs_url=None, redoc_url=None, openapi_url=None)
    app.state.config = config
    app.state.render_cache = RenderCache()
    app.state.content = ContentStore(config.content_dir)
    app.state.renderer = PageRenderer(config.template_dir, app.state.render_cache, config.markdown_extensions)

    def not_found_response():
        try:
            body = app.state.content.not_found()
        except PageNotFound:
            body = NOT_FOUND_BODY
        return HTMLResponse(app.state.renderer.main_page(body), status_code=404)

    @app.middleware('http')
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info('%s %s %d %.1fms', request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(PageNotFound)
    async def page_not_found(request: Request, exc: PageNotFound):
        return not_found_response()

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return not_found_response()
        return HTMLResponse(app.state.renderer.main_page(f'<h1>{exc.status_code}</h1>'), status_code=exc.status_code)

    @app.get('/', response_class=HTMLResponse)
    def home():
        return app.state.renderer.main_page(app.state.content.home())

    @app.get('/guide/{slug}', response_class=HTMLResponse)
    def guide(slug: str):
        return app.state.renderer.guide_markdown(app.state.content.guide(slug))

    if config.gzip:
        app.add_middleware(GZipMiddleware, minimum_size=500)
    return app


def main(argv=None):
    parser = argparse.ArgumentParser(description='Serve the vkguide site')
    parser.add_argument('--config', help='YAML config file')
    parser.add_argument('--host')
    parser.add_argument('--port', type=int)
    parser.add_argument('--content-dir')
    parser.add_argument('--template-dir')
    parser.add_argument('--log-level', default='info', choices=['debug', 'info', 'warning', 'error'])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format='%(asctime)s %(name)s %(levelname)s %(message)s'
    )
    config = SiteConfig.from_args(args)
    logger.info('Serving %s on %s:%d', config.content_dir, config.host, config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=args.log_level)


if __name__ == '__main__':
    main()
