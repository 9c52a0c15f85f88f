"""
Newsroom - A Flask News Site Framework
======================================

Backend for a news website with an admin API:
- Public article feed (home payload, sections, search, ticker)
- Flat-file content store for ticker items, tags, hero slides and article overrides
- Admin image uploads
- Article and category management

Usage:
    from flask import Flask
    from newsroom import Newsroom

    app = Flask(__name__)
    Newsroom(app)
"""

import logging
import os

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'auth': True,
    'content': True,
    'upload': True,
    'news': True,
    'news_public': True,
}


class Newsroom:
    """Flask extension that configures the app and registers every module"""

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from .core.config import Config
        from .core.database import init_database

        self._apply_config(app, Config)
        self._setup_data_dirs(app)
        self._setup_cors(app)
        init_database(app)
        self._register_blueprints(app)

        brand_name = self._config.get('brand_name', 'Newsroom')

        @app.context_processor
        def inject_newsroom_config():
            return {'newsroom_config': self._config, 'brand_name': brand_name}

        app.extensions['newsroom'] = self

    def _apply_config(self, app, config_cls):
        """Fill app.config with framework defaults the host app has not set"""
        for key in dir(config_cls):
            if key.isupper() and app.config.get(key) is None:
                app.config[key] = getattr(config_cls, key)

        for key, value in self._config.get('app_config', {}).items():
            app.config[key] = value

        if not app.config.get('SECRET_KEY'):
            logger.warning("SECRET_KEY is not set; admin sessions will not work")

    def _setup_data_dirs(self, app):
        for key in ('DATA_DIR', 'UPLOAD_FOLDER'):
            path = app.config.get(key)
            if path:
                # Pin to the launch directory; send_from_directory would use root_path
                path = os.path.abspath(path)
                app.config[key] = path
                os.makedirs(path, exist_ok=True)

        content_dir = os.path.dirname(app.config.get('CONTENT_FILE') or '')
        if content_dir:
            os.makedirs(content_dir, exist_ok=True)

    def _setup_cors(self, app):
        origins = app.config.get('CORS_ORIGINS') or '*'
        if isinstance(origins, str) and ',' in origins:
            origins = [origin.strip() for origin in origins.split(',') if origin.strip()]
        # Read by the cross_origin decorators on the public endpoints
        app.config['CORS_ORIGINS'] = origins

    def _feature_enabled(self, name):
        features = {**DEFAULT_FEATURES, **self._config.get('features', {})}
        return features.get(name, False)

    def _register_blueprints(self, app):
        if self._feature_enabled('auth'):
            from .modules.auth import auth_bp
            app.register_blueprint(auth_bp)
            self._registered.append('auth')

        if self._feature_enabled('content'):
            from .modules.content import content_bp
            app.register_blueprint(content_bp)
            self._registered.append('content')

        if self._feature_enabled('upload'):
            from .modules.upload import upload_bp, uploads_public_bp
            app.register_blueprint(upload_bp)
            app.register_blueprint(uploads_public_bp, url_prefix=app.config.get('UPLOAD_URL_PREFIX', '/uploads'))
            self._registered.append('upload')

        if self._feature_enabled('news'):
            from .modules.news import news_bp
            app.register_blueprint(news_bp)
            self._registered.append('news')

        if self._feature_enabled('news_public'):
            from .modules.news_public import news_public_bp
            app.register_blueprint(news_public_bp)
            self._registered.append('news_public')

    def get_registered_modules(self):
        return list(self._registered)


__all__ = ['Newsroom', '__version__']
