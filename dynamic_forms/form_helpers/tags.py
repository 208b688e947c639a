# dynamic_forms/form_helpers/tags.py

import calendar
import datetime
import flask
import re
from flask_wtf.csrf import generate_csrf
from markupsafe import Markup
from wtforms import widgets
from wtforms.fields import Label
from dynamic_forms import config


def flask_csrf_field():
    """
    Returns the (field name, token) pair for the hidden forgery protection field when Flask-WTF's CSRFProtect is
    registered on the current app and enabled. Returns None otherwise, including outside of a request.
    https://flask-wtf.readthedocs.io/en/1.2.x/csrf/#html-forms
    """
    if not flask.has_request_context():
        return None

    app = flask.current_app
    if 'csrf' not in app.extensions or not app.config.get('WTF_CSRF_ENABLED', True):
        return None

    field_name = app.config.get('WTF_CSRF_FIELD_NAME', 'csrf_token')
    return field_name, generate_csrf()


def _sanitized_name(object_name):
    # "blog[post]" -> "blog_post"
    return re.sub(r'\]\[|[^-a-zA-Z0-9:.]', '_', str(object_name)).rstrip('_')


def tag_id(object_name, method, suffix=None):
    tag = f"{_sanitized_name(object_name)}_{method}"
    if suffix:
        tag += f"_{suffix}"
    return tag


def tag_name(object_name, method, suffix=None):
    if suffix:
        return f"{object_name}[{method}({suffix})]"
    return f"{object_name}[{method}]"


class WidgetField:
    """
    The part of a wtforms field that the wtforms widgets read while rendering: id, name, the current data and, for
    selects, the (value, label) choices. Lets the widgets render controls named after a record (post[title]) without
    binding a Form.
    """

    def __init__(self, field_id, name, data=None, choices=()):
        self.id = field_id
        self.name = name
        self.data = data
        self.choices = choices

    @classmethod
    def for_record(cls, object_name, method, suffix=None, data=None, choices=()):
        return cls(tag_id(object_name, method, suffix), tag_name(object_name, method, suffix), data, choices)

    def _value(self):
        return str(self.data) if self.data is not None else ''

    def has_groups(self):
        return False

    def iter_choices(self):
        for value, label in self.choices:
            yield value, label, value == self.data, {}


def _as_datetime(value):
    # date-only values are taken as midnight
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return datetime.datetime.combine(value, datetime.time())
    return value


class TagBuilder:
    """
    Builds the individual tags a dynamic form is made of, rendering every control through the wtforms widgets.
    Every method returns markupsafe.Markup; attribute values and text content are escaped by the widgets, so the
    pieces can be concatenated without escaping them again.
    """

    text_input = widgets.TextInput()
    password_input = widgets.PasswordInput()
    hidden_input = widgets.HiddenInput()
    submit_input = widgets.SubmitInput()
    text_area_widget = widgets.TextArea()
    select_widget = widgets.Select()

    def __init__(self, text_size=config.DEFAULT_TEXT_SIZE, textarea_cols=config.DEFAULT_TEXTAREA_COLS,
                 textarea_rows=config.DEFAULT_TEXTAREA_ROWS, year_span=config.DEFAULT_YEAR_SPAN,
                 error_class=config.ERROR_WRAPPER_CLASS, csrf_field=flask_csrf_field, today=datetime.date.today):
        self.text_size = text_size
        self.textarea_cols = textarea_cols
        self.textarea_rows = textarea_rows
        self.year_span = year_span
        self.error_class = error_class
        self.csrf_field = csrf_field
        self.today = today

    @classmethod
    def from_app_config(cls, app_config):
        """
        Creates a TagBuilder from a flask app config (or any mapping using the same keys).
        :param app_config: flask.Config
        :return: TagBuilder
        """
        return cls(text_size=app_config.get('DYNAMIC_FORM_TEXT_SIZE', config.DEFAULT_TEXT_SIZE),
                   textarea_cols=app_config.get('DYNAMIC_FORM_TEXTAREA_COLS', config.DEFAULT_TEXTAREA_COLS),
                   textarea_rows=app_config.get('DYNAMIC_FORM_TEXTAREA_ROWS', config.DEFAULT_TEXTAREA_ROWS),
                   year_span=app_config.get('DYNAMIC_FORM_YEAR_SPAN', config.DEFAULT_YEAR_SPAN),
                   error_class=app_config.get('DYNAMIC_FORM_ERROR_CLASS', config.ERROR_WRAPPER_CLASS))

    # form level tags

    def form_tag(self, action, method='post', multipart=False):
        """
        Opening form tag. Browsers only send GET and POST, so other verbs are posted with a hidden _method field.
        When forgery protection is on, non-GET forms also get the hidden CSRF token field.
        :param action: url the form submits to
        :param method: http method
        :param multipart: whether to use multipart/form-data encoding, for file uploads
        :return: Markup
        """
        method = (method or 'post').lower()
        attrs = {'action': action, 'method': 'get' if method == 'get' else 'post'}
        if multipart:
            attrs['enctype'] = config.MULTIPART_ENCTYPE

        hidden = []
        if method not in ('get', 'post'):
            hidden.append(self._hidden_input('_method', method))
        if method != 'get' and self.csrf_field is not None:
            csrf = self.csrf_field()
            if csrf:
                hidden.append(self._hidden_input(*csrf))

        html = Markup(f"<form {widgets.html_params(**attrs)}>")
        if hidden:
            html += Markup('<div style="margin:0;padding:0;display:inline">') + Markup('').join(hidden) + Markup('</div>')
        return html

    def end_form_tag(self):
        return Markup('</form>')

    def submit_tag(self, value):
        return self.submit_input(WidgetField(False, 'commit'), value=value)

    def label(self, object_name, method, text):
        return Label(tag_id(object_name, method), text)()

    def error_wrapping(self, html):
        return Markup(f'<div {widgets.html_params(class_=self.error_class)}>') + html + Markup('</div>')

    # field tags

    def hidden_field(self, object_name, method, value=None):
        field = WidgetField.for_record(object_name, method, data=value)
        return self.hidden_input(field, value=field._value() if value is not None else False)

    def text_field(self, object_name, method, value=None):
        field = WidgetField.for_record(object_name, method, data=value)
        return self.text_input(field, size=self.text_size, value=field._value() if value is not None else False)

    def password_field(self, object_name, method, value=None):
        # the stored value is never sent back to the browser
        return self.password_input(WidgetField.for_record(object_name, method), size=self.text_size)

    def text_area(self, object_name, method, value=None):
        return self.text_area_widget(WidgetField.for_record(object_name, method, data=value),
                                     cols=self.textarea_cols, rows=self.textarea_rows)

    def boolean_select(self, object_name, method, value=None):
        data = str(value).lower() if isinstance(value, bool) else None
        return self._select(object_name, method, None, data, [('true', 'True'), ('false', 'False')])

    def date_select(self, object_name, method, value=None):
        """
        Year, month and day selects named post[written_on(1i)], post[written_on(2i)] and post[written_on(3i)].
        The year select spans year_span years either side of the value. Empty values select today's date.
        """
        value = value or self.today()
        years = range(value.year - self.year_span, value.year + self.year_span + 1)
        year_choices = [(str(year), str(year)) for year in years]
        month_choices = [(str(month), calendar.month_name[month]) for month in range(1, 13)]
        day_choices = [(str(day), str(day)) for day in range(1, 32)]

        return Markup('\n').join([self._select(object_name, method, '1i', str(value.year), year_choices),
                                  self._select(object_name, method, '2i', str(value.month), month_choices),
                                  self._select(object_name, method, '3i', str(value.day), day_choices)])

    def time_select(self, object_name, method, value=None):
        """Hour and minute selects (4i and 5i) separated by a colon. Plain dates select midnight."""
        value = _as_datetime(value or self.today())
        hour_choices = [(f"{hour:02d}", f"{hour:02d}") for hour in range(24)]
        minute_choices = [(f"{minute:02d}", f"{minute:02d}") for minute in range(60)]

        return (self._select(object_name, method, '4i', f"{value.hour:02d}", hour_choices) + Markup(' : ') +
                self._select(object_name, method, '5i', f"{value.minute:02d}", minute_choices))

    def datetime_select(self, object_name, method, value=None):
        """Date selects, an em dash, then the time selects."""
        value = _as_datetime(value or self.today())
        return (self.date_select(object_name, method, value) + Markup(' &mdash; ') +
                self.time_select(object_name, method, value))

    def _hidden_input(self, name, value):
        return self.hidden_input(WidgetField(False, name, value))

    def _select(self, object_name, method, suffix, selected, choices):
        field = WidgetField.for_record(object_name, method, suffix, data=selected, choices=choices)
        return self.select_widget(field)
