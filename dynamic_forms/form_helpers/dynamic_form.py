# dynamic_forms/form_helpers/dynamic_form.py

import flask
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Callable, Optional
from jinja2 import pass_context
from markupsafe import Markup
from dynamic_forms.form_helpers import columns as schema
from dynamic_forms.form_helpers.columns import ColumnKind
from dynamic_forms.form_helpers.errors import DynamicFormError, FormOptionsError, UnknownRecordError
from dynamic_forms.form_helpers.tags import TagBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormOptions:
    """
    Options accepted by form():
    * action - The action used when submitting the form (default: 'create' if a new record, otherwise 'update').
    * method - The method used when submitting the form (default: 'post').
    * multipart - Whether to change the enctype of the form to "multipart/form-data", used when uploading a file.
    * submit_value - The text of the submit button (default: derived from the action, eg "Create" or "Update").
    * input_block - Function of (record, column) returning the markup for a column, replacing the default
      label and input rendering.
    """
    action: Optional[str] = None
    method: str = 'post'
    multipart: bool = False
    submit_value: Optional[str] = None
    input_block: Optional[Callable] = None

    @classmethod
    def from_options(cls, options=None):
        """
        Builds FormOptions from a mapping of option names to values. Keys may be any objects whose str() is an option
        name. None values fall back to the defaults.
        :param options: mapping, FormOptions or None
        :return: FormOptions
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise FormOptionsError(f"Form options must be a mapping, not {type(options).__name__}.")

        options = {str(key): value for key, value in options.items() if value is not None}
        unknown = sorted(set(options) - {f.name for f in fields(cls)})
        if unknown:
            raise FormOptionsError(f"Unknown form option(s): {', '.join(unknown)}")

        for key in ('action', 'method'):
            if key in options and (not isinstance(options[key], str) or not options[key].strip()):
                raise FormOptionsError(f"Form option '{key}' must be a non-empty string, got {options[key]!r}.")
        if 'submit_value' in options and not isinstance(options['submit_value'], str):
            raise FormOptionsError(f"Form option 'submit_value' must be a string, got {options['submit_value']!r}.")
        if 'input_block' in options and not callable(options['input_block']):
            raise FormOptionsError("Form option 'input_block' must be callable with (record, column).")

        if 'method' in options:
            options['method'] = options['method'].strip().lower()
        if 'multipart' in options:
            options['multipart'] = bool(options['multipart'])
        return cls(**options)


def default_submit_value(action: str):
    """
    Submit button text for an action: everything but letters and digits removed, then capitalized.
    eg 'create' -> 'Create', 'sign_up!' -> 'Signup'
    """
    return re.sub(r'[\W_]', '', action).capitalize()


def mapping_resolver(records):
    """
    Record resolver looking names up in a mapping such as a jinja template context or flask.g.__dict__.
    Names that are missing or bound to None raise UnknownRecordError.
    """
    def resolve_record(record_name):
        record = records.get(record_name)
        if record is None:
            raise UnknownRecordError(record_name)
        return record

    return resolve_record


def flask_url_builder(action, identity=None):
    """
    Builds the form target with flask.url_for. Bare action names resolve against the blueprint handling the current
    request, so action 'update' inside the 'posts' blueprint means endpoint 'posts.update'.
    """
    endpoint = action if '.' in action else f".{action}"
    if identity is None:
        return flask.url_for(endpoint)
    return flask.url_for(endpoint, id=identity)


class FormAssembler:
    """
    Returns an entire form with all needed input tags for a record. For example, if the record named "post" has
    attributes title of type String and body of type Text, then form("post") would yield a form like the following
    (modulus formatting):

      <form action="/posts/create" method="post">
        <p>
          <label for="post_title">Title</label><br />
          <input id="post_title" name="post[title]" size="30" type="text" value="Hello World" />
        </p>
        <p>
          <label for="post_body">Body</label><br />
          <textarea cols="40" id="post_body" name="post[body]" rows="20"></textarea>
        </p>
        <input name="commit" type="submit" value="Create" />
      </form>

    Collaborators are injected: resolve_record maps record names to records, url_builder turns (action, identity)
    into the form target, and tags builds the individual tags.
    """

    def __init__(self, resolve_record=None, url_builder=flask_url_builder, tags=None):
        self.resolve_record = resolve_record
        self.url_builder = url_builder
        self.tags = tags or TagBuilder()

    def assemble(self, record_name, options=None, extension=None, resolve_record=None):
        """
        Assembles the form for a record.
        :param record_name: name of the record, also the prefix of the field names (post[title])
        :param options: FormOptions or a mapping of options, see FormOptions
        :param extension: optional function called with the form contents so far, right before the submit button.
            Whatever it returns (other than None) is added to the form as is.
        :param resolve_record: resolver to use for this call instead of the one given to the constructor
        :return: markupsafe.Markup
        """
        resolve = resolve_record or self.resolve_record
        if resolve is None:
            raise DynamicFormError("FormAssembler needs a record resolver to look up records by name.")

        options = FormOptions.from_options(options)
        record = resolve(record_name)
        new_record = schema.is_new_record(record)

        action = options.action or ('create' if new_record else 'update')
        identity = None if new_record else schema.record_identity(record)
        target = self.url_builder(action, identity)
        submit_value = options.submit_value if options.submit_value is not None else default_submit_value(action)

        contents = self.tags.form_tag(target, options.method, options.multipart)
        if not new_record:
            contents += self.tags.hidden_field(record_name, 'id', identity)
        contents += self.all_input_tags(record, record_name, options.input_block)
        if extension is not None:
            extra = extension(contents)
            if extra is not None:
                contents += Markup(extra)
        contents += self.tags.submit_tag(submit_value)
        contents += self.tags.end_form_tag()

        logger.debug(f"Assembled '{action}' form for record '{record_name}' targeting {target}")
        return contents

    def all_input_tags(self, record, record_name, input_block=None):
        errors = schema.record_errors(record)
        entries = []
        for column in schema.content_columns(record):
            if input_block is not None:
                entry = input_block(record, column)
                if entry is not None:
                    entries.append(Markup(entry))
            else:
                entries.append(self.default_input_block(record, record_name, column, errors))
        return Markup("\n").join(entries)

    def default_input_block(self, record, record_name, column, errors=None):
        """
        <p><label for="post_title">Title</label><br /><input ... /></p>, with the label and input wrapped in the error
        container when the field has error messages.
        """
        errors = errors if errors is not None else schema.record_errors(record)
        entry = (self.tags.label(record_name, column.name, column.human_name) + Markup('<br />') +
                 self.input_tag(record, record_name, column))
        if not errors.is_empty() and errors[column.name]:
            entry = self.tags.error_wrapping(entry)
        return Markup('<p>') + entry + Markup('</p>')

    def input_tag(self, record, record_name, column):
        """Input markup for a single column, picked by the column's kind."""
        value = schema.field_value(record, column.name)
        kind = column.kind

        if kind is ColumnKind.STRING and 'password' in column.name:
            return self.tags.password_field(record_name, column.name, value)
        elif kind is ColumnKind.TEXT:
            return self.tags.text_area(record_name, column.name, value)
        elif kind is ColumnKind.DATE:
            return self.tags.date_select(record_name, column.name, value)
        elif kind in (ColumnKind.DATETIME, ColumnKind.TIMESTAMP):
            return self.tags.datetime_select(record_name, column.name, value)
        elif kind is ColumnKind.TIME:
            return self.tags.time_select(record_name, column.name, value)
        elif kind is ColumnKind.BOOLEAN:
            return self.tags.boolean_select(record_name, column.name, value)
        else:
            return self.tags.text_field(record_name, column.name, value)


def form(record_name, options=None, extension=None, *, resolve_record, url_builder=flask_url_builder, tags=None):
    """One-shot form assembly with explicitly given collaborators. See FormAssembler.assemble"""
    assembler = FormAssembler(resolve_record=resolve_record, url_builder=url_builder, tags=tags)
    return assembler.assemble(record_name, options, extension)


def init_app(app, assembler=None):
    """
    Registers the form() template global on a flask app. In templates records are resolved from the template context:

      render_template('posts/new.html', post=post)  ->  {{ form('post', submit_value='Save') }}

    The body of a call block is added to the form right before the submit button:

      {% call form('entry', action='sign') %}<b>Department</b>{% endcall %}

    :param app: flask app
    :param assembler: FormAssembler to use, built from the app config when not given
    :return: the FormAssembler in use
    """
    if assembler is None:
        assembler = FormAssembler(tags=TagBuilder.from_app_config(app.config))
    app.extensions['dynamic_form'] = assembler

    @pass_context
    def form_helper(context, record_name, caller=None, **options):
        extension = None
        if caller is not None:
            extension = lambda contents: caller()
        return assembler.assemble(record_name, options, extension, resolve_record=mapping_resolver(context))

    app.add_template_global(form_helper, name='form')
    return assembler
