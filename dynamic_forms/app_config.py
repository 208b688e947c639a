# dynamic_forms/app_config.py

import json
import logging
import logging.handlers
from sqlalchemy.engine import URL


def assemble_postgresql_url(host, db_name, username, password="", port="", dialect="", ssl=""):
    """
    Database url for the POSTGRESQL_* settings of the json config. Built with sqlalchemy's URL so that passwords
    holding url-reserved characters are quoted.
    :param dialect: driver such as psycopg2 or pg8000, empty for sqlalchemy's default
    :param ssl: 'true' to require an ssl connection
    :return: string url
    """
    url = URL.create(drivername="postgresql+" + dialect if dialect else "postgresql",
                     username=username,
                     password=password or None,
                     host=host,
                     port=int(port) if port else None,
                     database=db_name,
                     query={"sslmode": "require"} if str(ssl).lower() == 'true' else {})
    return url.render_as_string(hide_password=False)


def json_to_config_factory(config_json_path: str):
    """
    This function turns a json file of config info into a flask app config class.
    The purpose is to allow the changing of app settings using a json file. Where different json files represent new
    configurations and configurations can be changed by changing the json file.
    Each key of the json file maps to a dictionary with the setting under 'VALUE' and, optionally, a 'DESCRIPTION'.
    :param config_json_path: string path
    :return: DynamicServerConfig class with json keys as attributes
    """

    with open(config_json_path) as config_file:
        config_dict = json.load(config_file)

    # Remove sub-dictionary and descriptions
    config_dict = {k: config_dict[k]['VALUE'] for k in list(config_dict.keys())}

    # Assemble Sqlalchemy url if the database is a postgresql server
    if config_dict.get("POSTGRESQL_DATABASE"):
        config_dict['SQLALCHEMY_DATABASE_URI'] = assemble_postgresql_url(host=config_dict["POSTGRESQL_HOST"],
                                                                         db_name=config_dict["POSTGRESQL_DATABASE"],
                                                                         username=config_dict["POSTGRESQL_USERNAME"],
                                                                         password=config_dict.get("POSTGRESQL_PASSWORD", ""),
                                                                         port=config_dict.get("POSTGRESQL_PORT", ""),
                                                                         dialect=config_dict.get("POSTGRESQL_DIALECT", ""),
                                                                         ssl=config_dict.get("POSTGRESQL_SSL", ""))
    config_dict['CONFIG_JSON_PATH'] = config_json_path

    # The DynamicServerConfig class is created dynamically using Python's type() function, which takes three arguments:
    # the name of the class, a tuple of parent classes (empty in this case), and a dictionary of attributes and their
    # values, the config_dict here.
    return type("DynamicServerConfig", (), config_dict)


def setup_sql_logging(log_filepath, formatter=None):
    """
    Set up a logger instance to log SQLAlchemy database activity to a file and to the console.

    @param log_filepath: path of the rotating log file
    @param formatter: logging.Formatter for both handlers
    @return: the sqlalchemy.engine logger
    """
    handler = logging.handlers.RotatingFileHandler(log_filepath, maxBytes=10000, backupCount=1)
    handler.setLevel(logging.DEBUG)
    if formatter:
        handler.setFormatter(formatter)
    db_logger = logging.getLogger('sqlalchemy.engine')
    db_logger.addHandler(handler)

    # Add a StreamHandler to log to the console as well
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    if formatter:
        console_handler.setFormatter(formatter)
    db_logger.addHandler(console_handler)
    db_logger.setLevel(logging.DEBUG)
    return db_logger
