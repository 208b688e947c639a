# dynamic_forms/form_helpers/errors.py

from collections.abc import Mapping
from typing import List, Protocol, runtime_checkable


class DynamicFormError(Exception):
    """Base class for errors raised while assembling a dynamic form."""
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)


class UnknownRecordError(DynamicFormError, LookupError):
    """Raised when a record name does not resolve to a record in the current scope."""
    def __init__(self, record_name):
        self.record_name = record_name
        super().__init__(f"No record named '{record_name}' is available to build a form from.")


class FormOptionsError(DynamicFormError, ValueError):
    """Exception raised for unknown or malformed form options."""


@runtime_checkable
class ErrorCollection(Protocol):
    """
    What the form assembler needs from a record's errors: an emptiness check and a per-field lookup
    that returns zero or more messages.
    """

    def is_empty(self) -> bool:
        ...

    def __getitem__(self, field: str) -> List[str]:
        ...


class RecordErrors:
    """
    Validation messages of a single record, keyed by field name.
    Lookups of fields without messages return an empty list rather than raising.
    """

    def __init__(self, messages: Mapping = None):
        self._messages = {}
        for field, field_messages in (messages or {}).items():
            if isinstance(field_messages, str):
                field_messages = [field_messages]
            for message in field_messages:
                self.add(field, message)

    def add(self, field: str, message: str):
        self._messages.setdefault(str(field), []).append(message)

    def is_empty(self):
        return not any(self._messages.values())

    def count(self):
        return sum(len(field_messages) for field_messages in self._messages.values())

    def clear(self):
        self._messages.clear()

    def full_messages(self):
        """
        Messages prefixed with the humanized field name, eg "Title can't be blank".
        "base" messages are not prefixed because they concern the whole record.
        :return: list of strings in the order the fields were first added
        """
        messages = []
        for field, field_messages in self._messages.items():
            for message in field_messages:
                if field == 'base':
                    messages.append(message)
                else:
                    messages.append(f"{humanize(field)} {message}")
        return messages

    def __getitem__(self, field):
        return list(self._messages.get(str(field), []))

    def __contains__(self, field):
        return bool(self._messages.get(str(field)))

    def __len__(self):
        return self.count()

    def __iter__(self):
        for field, field_messages in self._messages.items():
            for message in field_messages:
                yield field, message

    def __repr__(self):
        return f"RecordErrors({self._messages!r})"


class _NoErrors:
    def is_empty(self):
        return True

    def __getitem__(self, field):
        return []


NO_ERRORS = _NoErrors()


def as_error_collection(errors):
    """
    Adapts whatever a record exposes as its errors to the ErrorCollection protocol.
    None means the record carries no errors. Plain dictionaries of {field: [messages]} are wrapped in RecordErrors.
    :param errors: the record's errors attribute
    :return: object satisfying ErrorCollection
    """
    if errors is None:
        return NO_ERRORS
    if isinstance(errors, ErrorCollection):
        return errors
    if isinstance(errors, Mapping):
        return RecordErrors(errors)
    raise TypeError(f"Cannot use {type(errors).__name__} as a record error collection.")


def humanize(attribute_name: str):
    """
    Turns an attribute name into a label, eg "written_on" to "Written on" and "author_id" to "Author".
    """
    label = str(attribute_name)
    if label.endswith('_id'):
        label = label[:-3]
    label = label.replace('_', ' ').strip()
    return label.capitalize()
