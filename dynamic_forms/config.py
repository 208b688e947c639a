import os

# class of the element wrapped around fields that currently have validation errors
ERROR_WRAPPER_CLASS = 'fieldWithErrors'

DEFAULT_TEXT_SIZE = 30

DEFAULT_TEXTAREA_COLS = 40

DEFAULT_TEXTAREA_ROWS = 20

# number of years offered either side of the selected year in date selects
DEFAULT_YEAR_SPAN = 5

MULTIPART_ENCTYPE = 'multipart/form-data'

JSON_CONFIG_FILE = r'dynamic_forms/app_config.json'


class DefaultConfig:
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///dynamic_forms.db')
    SECRET_KEY = os.environ.get('SECRET_KEY', 'ABC')
    WTF_CSRF_ENABLED = True
    DYNAMIC_FORM_ERROR_CLASS = ERROR_WRAPPER_CLASS
    DYNAMIC_FORM_TEXT_SIZE = DEFAULT_TEXT_SIZE
    DYNAMIC_FORM_TEXTAREA_COLS = DEFAULT_TEXTAREA_COLS
    DYNAMIC_FORM_TEXTAREA_ROWS = DEFAULT_TEXTAREA_ROWS
    DYNAMIC_FORM_YEAR_SPAN = DEFAULT_YEAR_SPAN


class DefaultTestConfig(DefaultConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'ABC'
    WTF_CSRF_ENABLED = False
