from dynamic_forms import db
from dynamic_forms.form_helpers.errors import RecordErrors
from sqlalchemy import inspect


class FormRecordMixin:
    """
    Gives a model what the dynamic form needs beyond its columns: a new_record flag and an error collection.
    Errors are not persisted; they live on the instance until validate() runs again.
    """

    @property
    def errors(self):
        if '_form_errors' not in self.__dict__:
            self.__dict__['_form_errors'] = RecordErrors()
        return self.__dict__['_form_errors']

    @property
    def new_record(self):
        return not inspect(self).has_identity

    def validate(self):
        """
        Clears the error collection, runs validate_record() and returns whether the record is free of errors.
        """
        self.errors.clear()
        self.validate_record()
        return self.errors.is_empty()

    def validate_record(self):
        pass


class PostModel(db.Model, FormRecordMixin):
    __tablename__ = 'posts'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String, nullable=False)
    author_name = db.Column(db.String)
    body = db.Column(db.Text)
    written_on = db.Column(db.Date)

    def validate_record(self):
        if not (self.title or '').strip():
            self.errors.add('title', "can't be blank")
        if self.body is not None and len(self.body) > 10000:
            self.errors.add('body', "is too long (maximum is 10000 characters)")

    def __repr__(self):
        return f"Post('{self.id}', '{self.title}', '{self.written_on}')"
