# Exception Handlers
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, too much sensitive info might be shown !
#
# The exceptions will be caught in http_method_decorator and formatted, for example:
# {
#      "error": "Not Found: Invalid \"Book\" id \"12\""
# }
# or, for validation errors:
# {
#      "errors": ["Title must not be blank"]
# }
#
import traceback
from flask import request, has_request_context
from werkzeug.exceptions import NotFound
import halrest
from sqlalchemy.exc import DontWrapMixin
from http import HTTPStatus
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class HALError(Exception, DontWrapMixin):
    """
    Base class for the errors that are returned to the client
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""

    def to_dict(self):
        """
        :return: the error document sent back to the client
        """
        return {"error": self.message}


class NotFoundError(HALError, NotFound):
    """
    This exception is raised when an entity type, an item or a relationship was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "Not Found: "

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value):
        """
        :param message: Message to be returned in the (json) body
        :param status_code: HTTP Status code
        """
        HALError.__init__(self, message)
        self.status_code = status_code
        halrest.log.error("Not found: %s", message)
        if is_debug():
            self.message += message
        else:
            self.message += HIDDEN_LOG


class BadRequestError(HALError):
    """
    This exception is raised when the request parameters are invalid.
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Bad Request: "

    def __init__(self, message="", status_code=HTTPStatus.BAD_REQUEST.value):
        HALError.__init__(self, message)
        self.status_code = status_code
        halrest.log.warning("Bad Request: %s", message)
        self.message += message


class OrderError(BadRequestError):
    """
    This exception is raised when an order token references a property the entity type doesn't have
    """

    def __init__(self, token, reason=None):
        """
        :param token: the offending order token, e.g. "nonexistent desc"
        :param reason: message shown to the client, it always names the token
        """
        self.token = token
        BadRequestError.__init__(self, reason or f"no property named {token}")


class ValidationError(HALError):
    """
    This exception is raised when an entity could not be saved because it is invalid.
    All the field-level messages are sent back to the client
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Validation Error: "

    def __init__(self, messages=(), status_code=HTTPStatus.BAD_REQUEST.value):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        HALError.__init__(self, *self.messages)
        self.status_code = status_code
        halrest.log.warning("ValidationError: %s", self.messages)
        self.message += ", ".join(self.messages)

    def to_dict(self):
        return {"errors": self.messages}


class GenericError(HALError):
    """
    This exception is raised when an error has been detected
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500
    message = "Generic Error: "

    def __init__(self, message="", status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        HALError.__init__(self, message)
        self.status_code = status_code
        halrest.log.error("Generic Error: %s", message)
        if is_debug():
            if has_request_context():
                halrest.log.info(f"Error in {request.url}")
            halrest.log.debug(traceback.format_exc(120))
            self.message += str(message)
        else:
            self.message += HIDDEN_LOG


class DeleteError(GenericError):
    """
    This exception is raised when the data-access layer refuses to destroy an item,
    e.g. because other items still reference it
    """

    message = "Delete Error: "
