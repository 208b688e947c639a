import pytest
from dynamic_forms import db
from dynamic_forms.form_helpers.columns import (Column, ColumnKind, content_columns, is_new_record,
                                                kind_for_sqlalchemy_type, record_errors, record_identity)
from dynamic_forms.form_helpers.errors import RecordErrors
from dynamic_forms.models import PostModel


class ArticleModel(db.Model):
    __tablename__ = 'articles'
    id = db.Column(db.Integer, primary_key=True)
    kind = db.Column(db.String, nullable=False)
    post_id = db.Column(db.Integer, db.ForeignKey('posts.id'))
    reviewer = db.Column(db.Integer, db.ForeignKey('posts.id'))
    comments_count = db.Column(db.Integer)
    headline = db.Column(db.String(120), info={'label': 'Headline text'})
    published = db.Column(db.Boolean)
    price = db.Column(db.Numeric(10, 2))
    rating = db.Column(db.Float)
    starts_at = db.Column(db.Time)
    updated_at = db.Column(db.DateTime)
    attachment = db.Column(db.LargeBinary)

    __mapper_args__ = {'polymorphic_on': kind, 'polymorphic_identity': 'article'}


@pytest.mark.parametrize("kind, expected", [
    ('string', ColumnKind.STRING),
    ('DATETIME', ColumnKind.DATETIME),
    (ColumnKind.TEXT, ColumnKind.TEXT),
    ('geometry', ColumnKind.OTHER),
    (None, ColumnKind.OTHER),
])
def test_kind_coercion(kind, expected):
    assert ColumnKind.coerce(kind) is expected


def test_column_defaults_human_name():
    column = Column('date', 'written_on')
    assert column.kind is ColumnKind.DATE
    assert column.human_name == 'Written on'


def test_sqlalchemy_type_mapping():
    assert kind_for_sqlalchemy_type(db.Text()) is ColumnKind.TEXT
    assert kind_for_sqlalchemy_type(db.String(60)) is ColumnKind.STRING
    assert kind_for_sqlalchemy_type(db.Date()) is ColumnKind.DATE
    assert kind_for_sqlalchemy_type(db.DateTime()) is ColumnKind.DATETIME
    assert kind_for_sqlalchemy_type(db.JSON()) is ColumnKind.OTHER


def test_content_columns_of_a_model():
    columns = content_columns(PostModel())
    assert [(c.name, c.kind, c.human_name) for c in columns] == [
        ('title', ColumnKind.STRING, 'Title'),
        ('author_name', ColumnKind.STRING, 'Author name'),
        ('body', ColumnKind.TEXT, 'Body'),
        ('written_on', ColumnKind.DATE, 'Written on'),
    ]


def test_content_columns_skip_keys_counters_and_discriminator():
    columns = content_columns(ArticleModel())
    assert [(c.name, c.kind) for c in columns] == [
        ('headline', ColumnKind.STRING),
        ('published', ColumnKind.BOOLEAN),
        ('price', ColumnKind.DECIMAL),
        ('rating', ColumnKind.FLOAT),
        ('starts_at', ColumnKind.TIME),
        ('updated_at', ColumnKind.DATETIME),
        ('attachment', ColumnKind.BINARY),
    ]
    assert columns[0].human_name == 'Headline text'


def test_content_columns_of_duck_typed_records(post):
    class LegacyColumn:
        def __init__(self, type, name, human_name):
            self.type, self.name, self.human_name = type, name, human_name

    post.columns = [LegacyColumn('text', 'body', 'Body text')]
    assert content_columns(post) == [Column(ColumnKind.TEXT, 'body', 'Body text')]


def test_content_columns_of_unknown_objects():
    with pytest.raises(TypeError):
        content_columns(object())


def test_new_record_and_identity_of_models(app):
    post = PostModel(title='Hello World')
    assert is_new_record(post)
    assert record_identity(post) is None

    db.session.add(post)
    assert is_new_record(post)

    db.session.commit()
    assert not is_new_record(post)
    assert record_identity(post) == post.id


def test_new_record_and_identity_of_duck_typed_records(post):
    assert is_new_record(post)
    post.persist(3)
    assert not is_new_record(post)
    assert record_identity(post) == 3


def test_record_errors():
    class Bare:
        pass

    assert record_errors(Bare()).is_empty()

    model = PostModel()
    assert isinstance(record_errors(model), RecordErrors)
    assert record_errors(model) is model.errors

    class Broken:
        errors = 42

    with pytest.raises(TypeError):
        record_errors(Broken())
