"""Flask application factory for the idea board."""

from flask import Flask

from board import api, pages
from gateway import create_gateway
from store_config import get_secret_key


def create_app(
    *,
    test_config=None,
    gateway=None,
):
    """Create and configure the Flask application.

    :param test_config: Optional config dictionary applied after app creation.
    :type test_config: dict | None
    :param gateway: Optional storage gateway override; defaults to ``BOARD_STORE``.
    :type gateway: gateway.Gateway | None
    :returns: Configured Flask app instance.
    :rtype: flask.Flask
    """
    app = Flask(__name__)
    app.config["SECRET_KEY"] = get_secret_key()
    if test_config:
        app.config.update(test_config)
    app.config["BOARD_GATEWAY"] = gateway if gateway is not None else create_gateway()

    app.register_blueprint(api.bp)
    app.register_blueprint(pages.bp)
    return app
