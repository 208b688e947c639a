# dynamic_forms/posts/routes.py

import flask
import sqlalchemy.exc
from dynamic_forms import db
from dynamic_forms.form_helpers.columns import ColumnKind, content_columns
from dynamic_forms.models import PostModel
from dynamic_forms.utils import FlaskAppUtils, FormParamUtils

posts = flask.Blueprint('posts', __name__)


def assign_form_params(record, record_name, params):
    """
    Copies the values posted by a dynamic form onto the record. Attributes that were not posted are left alone.
    :param record: record to update
    :param record_name: prefix of the posted field names
    :param params: request.form
    :return: dictionary of attribute names to messages for values that could not be read
    """
    problems = {}
    for column in content_columns(record):
        try:
            if column.kind is ColumnKind.DATE:
                value = FormParamUtils.date_from_params(params, record_name, column.name)
            elif column.kind in (ColumnKind.DATETIME, ColumnKind.TIMESTAMP):
                value = FormParamUtils.datetime_from_params(params, record_name, column.name)
            else:
                value = FormParamUtils.field_param(params, record_name, column.name)
        except ValueError:
            problems[column.name] = "is not a valid date"
            continue

        if value is not None:
            setattr(record, column.name, value)
    return problems


def validate_with_problems(record, problems):
    valid = record.validate()
    for attribute, message in problems.items():
        record.errors.add(attribute, message)
    return valid and not problems


def commit_post(post, flash_message):
    try:
        db.session.add(post)
        db.session.commit()
    except sqlalchemy.exc.SQLAlchemyError as e:
        FlaskAppUtils.attempt_db_rollback(db)
        return FlaskAppUtils.web_exception_subroutine(flash_message="Error saving post",
                                                      thrown_exception=e,
                                                      app_obj=flask.current_app)
    flask.flash(flash_message, 'success')
    return flask.redirect(flask.url_for('posts.edit', id=post.id))


@posts.route("/posts")
def index():
    """Lists the posts with links to their edit forms"""
    all_posts = db.session.execute(db.select(PostModel).order_by(PostModel.id)).scalars().all()
    return flask.render_template('posts/index.html', title='Posts', posts=all_posts)


@posts.route("/posts/new")
def new():
    return flask.render_template('posts/new.html', title='New Post', post=PostModel())


@posts.route("/posts/create", methods=['POST'])
def create():
    """
    Creates a post from the fields of the dynamic form rendered by new(). Invalid submissions get the form back with
    the offending fields wrapped in the error container.
    """
    post = PostModel()
    problems = assign_form_params(post, 'post', flask.request.form)
    if not validate_with_problems(post, problems):
        return flask.render_template('posts/new.html', title='New Post', post=post), 422

    return commit_post(post, flash_message=f"Post '{post.title}' created.")


@posts.route("/posts/<int:id>/edit")
def edit(id):
    post = db.get_or_404(PostModel, id)
    return flask.render_template('posts/edit.html', title='Edit Post', post=post)


@posts.route("/posts/update/<int:id>", methods=['POST'])
def update(id):
    post = db.get_or_404(PostModel, id)
    problems = assign_form_params(post, 'post', flask.request.form)
    if not validate_with_problems(post, problems):
        html = flask.render_template('posts/edit.html', title='Edit Post', post=post)
        # the rejected values must not be flushed by a later query in this session
        db.session.rollback()
        return html, 422

    return commit_post(post, flash_message=f"Post '{post.title}' updated.")
