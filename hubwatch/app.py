"""Flask application entry point for the hub monitor."""

from __future__ import annotations

import atexit

from flask import Flask

from .api.routes import create_blueprint
from .bootstrap import BootstrapContext, bootstrap


def create_app(ctx: BootstrapContext | None = None) -> Flask:
    ctx = ctx or bootstrap()
    app = Flask(__name__)
    app.config["HUBWATCH_CONFIG"] = ctx.config
    app.extensions["hubwatch"] = ctx
    app.register_blueprint(
        create_blueprint(ctx.store, ctx.stats, ctx.hub), url_prefix="/api"
    )
    atexit.register(ctx.shutdown)
    return app


if __name__ == "__main__":
    app = create_app()
    config = app.config["HUBWATCH_CONFIG"]
    app.run(host=config.web.host, port=config.web.port)
