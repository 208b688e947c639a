# dynamic_forms/form_helpers/columns.py

import sqlalchemy as sa
from dataclasses import dataclass
from enum import Enum
from sqlalchemy import inspect
from dynamic_forms.form_helpers.errors import as_error_collection, humanize


class ColumnKind(str, Enum):
    """Storage kinds a form field can be rendered for."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    TIME = "time"
    BOOLEAN = "boolean"
    BINARY = "binary"
    OTHER = "other"

    @classmethod
    def coerce(cls, kind):
        """
        Returns the ColumnKind for an enum member or its string value. Anything unrecognized becomes OTHER.
        """
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Column:
    kind: ColumnKind
    name: str
    human_name: str = None

    def __post_init__(self):
        # frozen dataclass, so normalized values have to be set through object.__setattr__
        object.__setattr__(self, 'kind', ColumnKind.coerce(self.kind))
        if not self.human_name:
            object.__setattr__(self, 'human_name', humanize(self.name))


# Order matters: Text subclasses String and DateTime is checked before Date and Time.
_SQLALCHEMY_KINDS = [
    (sa.Text, ColumnKind.TEXT),
    (sa.String, ColumnKind.STRING),
    (sa.Boolean, ColumnKind.BOOLEAN),
    (sa.Integer, ColumnKind.INTEGER),
    (sa.Float, ColumnKind.FLOAT),
    (sa.Numeric, ColumnKind.DECIMAL),
    (sa.DateTime, ColumnKind.DATETIME),
    (sa.Date, ColumnKind.DATE),
    (sa.Time, ColumnKind.TIME),
    (sa.LargeBinary, ColumnKind.BINARY),
]


def kind_for_sqlalchemy_type(column_type):
    """
    Maps a SQLAlchemy column type (eg db.String(60), db.Text) to a ColumnKind.
    :param column_type: sqlalchemy TypeEngine instance
    :return: ColumnKind
    """
    for sa_type, kind in _SQLALCHEMY_KINDS:
        if isinstance(column_type, sa_type):
            return kind
    return ColumnKind.OTHER


def _mapper_for(record):
    mapper = inspect(type(record), raiseerr=False)
    if mapper is None or not hasattr(mapper, 'columns'):
        return None
    return mapper


def content_columns(record):
    """
    Lists the columns of a record that users edit through a form, in schema order.

    Records that define a content_columns() method decide for themselves. For SQLAlchemy models the mapper is used,
    skipping primary keys, foreign keys, columns named *_id or *_count and the polymorphic discriminator column.
    A column can override its label with Column(..., info={'label': 'Some label'}).
    :param record: the record being form-edited
    :return: list of Column
    """
    if callable(getattr(record, 'content_columns', None)):
        return [c if isinstance(c, Column) else Column(c.type, c.name, getattr(c, 'human_name', None))
                for c in record.content_columns()]

    mapper = _mapper_for(record)
    if mapper is None:
        raise TypeError(f"Cannot list the columns of {type(record).__name__}; it is neither mapped by SQLAlchemy "
                        f"nor defines content_columns().")

    discriminator = mapper.polymorphic_on
    columns = []
    for key, sa_column in mapper.columns.items():
        if sa_column.primary_key or sa_column.foreign_keys:
            continue
        if key.endswith('_id') or key.endswith('_count'):
            continue
        if discriminator is not None and sa_column is discriminator:
            continue
        label = sa_column.info.get('label') if sa_column.info else None
        columns.append(Column(kind_for_sqlalchemy_type(sa_column.type), key, label))
    return columns


def is_new_record(record):
    """
    True when the record has not been saved yet. An explicit new_record attribute wins over SQLAlchemy instance state.
    """
    new_record = getattr(record, 'new_record', None)
    if new_record is not None:
        return bool(new_record() if callable(new_record) else new_record)

    state = inspect(record, raiseerr=False)
    if state is not None and hasattr(state, 'has_identity'):
        return not state.has_identity
    return getattr(record, 'id', None) is None


def record_identity(record):
    """
    Identity value of a persisted record, or None. Single column primary keys come back as a plain value.
    """
    state = inspect(record, raiseerr=False)
    if state is not None and getattr(state, 'identity', None):
        identity = state.identity
        return identity[0] if len(identity) == 1 else identity
    return getattr(record, 'id', None)


def record_errors(record):
    return as_error_collection(getattr(record, 'errors', None))


def field_value(record, attribute_name):
    return getattr(record, attribute_name, None)
