import os
import flask
import logging
import dynamic_forms.app_config as app_config
import dynamic_forms.config as config
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect
from werkzeug.middleware.proxy_fix import ProxyFix

VERSION = '0.4.0'

db = SQLAlchemy()
csrf = CSRFProtect()


def create_app(config_class=config.DefaultConfig):

    # logging format
    # example usage: https://github.com/tenable/flask-logging-demo
    default_formatter = logging.Formatter('[%(asctime)s] %(levelname)s in %(module)s: %(message)s')

    # start app
    app = flask.Flask(__name__)

    # config app from config class
    app.config.from_object(config_class)

    # if the app is not being debugged or tested, then we need to use the gunicorn logger handlers when in production.
    # also need to do something so that it can accept proxy calls
    if not app.debug and not app.testing:
        gunicorn_handlers = logging.getLogger('gunicorn.error').handlers
        if gunicorn_handlers:
            app.logger.handlers = gunicorn_handlers

        # https://flask.palletsprojects.com/en/2.3.x/deploying/proxy_fix/
        app.wsgi_app = ProxyFix(app.wsgi_app)

    # set universal format for all logging handlers.
    app.config['DEFAULT_LOGGING_FORMATTER'] = default_formatter
    for handler in app.logger.handlers:
        handler.setFormatter(default_formatter)

    db.init_app(app)
    csrf.init_app(app)

    # add version number to config
    app.config['VERSION'] = VERSION

    # If the SQLALCHEMY_ECHO parameter is true, need to set up logs for logging sql.
    # https://docs.sqlalchemy.org/en/20/core/engines.html#sqlalchemy.create_engine.params.echo
    if app.config.get("SQLALCHEMY_ECHO") and app.config.get("SQLALCHEMY_LOG_FILE"):
        log_path = os.path.join(app.config.get("SQL_LOG_LOCATION", ''), app.config.get("SQLALCHEMY_LOG_FILE"))
        app_config.setup_sql_logging(log_filepath=log_path, formatter=default_formatter)

    # make form() available in templates
    from dynamic_forms.form_helpers import dynamic_form
    dynamic_form.init_app(app)

    # add blueprints
    # https://flask.palletsprojects.com/en/2.3.x/blueprints/
    from dynamic_forms.posts.routes import posts
    app.register_blueprint(posts)

    return app
