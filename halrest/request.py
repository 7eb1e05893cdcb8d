"""
Request parsing

The resources receive the typed request parameters from HALRequest:
- query args: offset, limit, order (or order[]), e.g. ?offset=30&limit=10&order=title+desc&order=id
- body: json object or form data
"""
from flask import Request
import halrest
from .config import get_int_config
from .errors import BadRequestError


# pylint: disable=too-many-ancestors
class HALRequest(Request):
    """
    Parse the HAL collection arguments and the request body
    """

    def _get_int_arg(self, name: str, default: int) -> int:
        value = self.args.get(name)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            raise BadRequestError(f'Invalid integer "{value}" for {name}')

    @property
    def offset(self) -> int:
        """
        :return: number of items the client wants to skip when fetching a collection
        """
        return self._get_int_arg("offset", 0)

    @property
    def limit(self) -> int:
        """
        :return: page size requested by the client, capped at MAX_PAGE_LIMIT
        """
        limit = self._get_int_arg("limit", get_int_config("DEFAULT_PAGE_LIMIT"))
        max_limit = get_int_config("MAX_PAGE_LIMIT")
        if limit > max_limit:
            halrest.log.debug(f"limit {limit} exceeds MAX_PAGE_LIMIT {max_limit}")
            limit = max_limit
        return limit

    @property
    def order(self) -> tuple:
        """
        :return: the order tokens, "order" may be repeated, "order[]" is accepted too
        """
        return tuple(token for token in self.args.getlist("order") + self.args.getlist("order[]") if token.strip())

    def get_body_params(self) -> dict:
        """
        :return: request body parameters (json object or form data)
        """
        if self.method in ("GET", "HEAD", "OPTIONS", "DELETE"):
            return {}
        if self.is_json:
            result = self.get_json(silent=True)
            if result is None and self.get_data():
                raise BadRequestError("Invalid JSON payload")
            result = {} if result is None else result
            if not isinstance(result, dict):
                raise BadRequestError(f"Invalid JSON payload : {result}")
            return result
        return self.form.to_dict()
