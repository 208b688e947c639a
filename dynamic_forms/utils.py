import datetime
import flask
import flask_sqlalchemy
import sqlalchemy.exc


class FlaskAppUtils:
    """
    To provide additional context for utility functions, they are organized as static methods under classes.
    This class is for utility functions that are specific to the flask application.
    """

    @staticmethod
    def web_exception_subroutine(flash_message: str, thrown_exception: Exception, app_obj: flask.Flask,
                                 redirect_endpoint: str = 'posts.index'):
        """
        Sub-process for handling patterns
        @param flash_message: message shown to the user, followed by the exception
        @param thrown_exception:
        @param app_obj:
        @param redirect_endpoint: where to send the user afterwards
        @return: redirect response
        """
        flash_message = flash_message + f": {thrown_exception}"
        flask.flash(flash_message, 'error')
        app_obj.logger.error(thrown_exception, exc_info=True)
        return flask.redirect(flask.url_for(redirect_endpoint))

    @staticmethod
    def attempt_db_rollback(db: flask_sqlalchemy.SQLAlchemy):
        """
        Attempts to rollback the database session. Exceptions are generally raised when there are no changes to rollback.
        """
        try:
            db.session.rollback()
        except sqlalchemy.exc.SQLAlchemyError as e:
            flask.current_app.logger.warning(f"Database rollback failed: {e}")


class FormParamUtils:
    """
    Utility functions for reading the parameters posted by dynamic forms, where the fields are named record[attribute]
    and date parts are named record[attribute(1i)], record[attribute(2i)], ...
    """

    @staticmethod
    def field_param(params, record_name: str, attribute: str, default=None):
        return params.get(f"{record_name}[{attribute}]", default)

    @staticmethod
    def date_from_params(params, record_name: str, attribute: str):
        """
        Rebuilds a date from the year (1i), month (2i) and day (3i) selects of a date_select.
        :param params: request.form or any mapping of posted values
        :return: datetime.date, or None when no date parts were posted
        :raises ValueError: when the parts do not make a valid date, eg February 31
        """
        parts = FormParamUtils._multiparameter_parts(params, record_name, attribute, 3)
        if parts is None:
            return None
        return datetime.date(*parts)

    @staticmethod
    def datetime_from_params(params, record_name: str, attribute: str):
        """Same as date_from_params with the hour (4i) and minute (5i) of a datetime_select."""
        parts = FormParamUtils._multiparameter_parts(params, record_name, attribute, 5)
        if parts is None:
            return None
        return datetime.datetime(*parts)

    @staticmethod
    def _multiparameter_parts(params, record_name, attribute, count):
        raw_parts = [params.get(f"{record_name}[{attribute}({i}i)]") for i in range(1, count + 1)]
        if not any(raw_parts):
            return None
        if not all(raw_parts):
            raise ValueError(f"Incomplete value posted for {attribute}.")
        return [int(part) for part in raw_parts]
