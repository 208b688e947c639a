import datetime
import pytest
from dynamic_forms import config, create_app, db
from dynamic_forms.form_helpers.columns import Column
from dynamic_forms.form_helpers.dynamic_form import FormAssembler, mapping_resolver
from dynamic_forms.form_helpers.errors import RecordErrors
from dynamic_forms.form_helpers.tags import TagBuilder


class Post:
    """Plain record standing in for a model: columns, new_record flag and errors are all set by hand."""

    def __init__(self):
        self.id = None
        self.new_record = True
        self.title = "Hello World"
        self.author_name = ""
        self.body = "Back to the hill and over it again!"
        self.secret = 1
        self.written_on = datetime.date(2004, 6, 15)
        self.errors = RecordErrors({'author_name': ["can't be empty"], 'body': ['foo']})
        self.columns = [Column('string', 'title', 'Title'), Column('text', 'body', 'Body')]

    def content_columns(self):
        return self.columns

    def persist(self, identity=1):
        self.new_record = False
        self.id = identity
        return self


class User:
    def __init__(self):
        self.id = None
        self.new_record = True
        self.email = ""
        self.errors = RecordErrors({'email': ['nonempty']})

    def content_columns(self):
        return [Column('string', 'email', 'Email')]


def join_url(action, identity=None):
    """Builds 'create' or 'update/1', like a router with no prefix."""
    return "/".join(str(part) for part in (action, identity) if part is not None)


@pytest.fixture
def post():
    return Post()


@pytest.fixture
def user():
    return User()


@pytest.fixture
def records(post, user):
    return {'post': post, 'user': user}


@pytest.fixture
def tags():
    return TagBuilder(csrf_field=None, today=lambda: datetime.date(2004, 6, 15))


@pytest.fixture
def assembler(records, tags):
    return FormAssembler(resolve_record=mapping_resolver(records), url_builder=join_url, tags=tags)


@pytest.fixture
def app():
    app = create_app(config.DefaultTestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
