# halrest to json encoding

import datetime
import decimal
from flask.json.provider import DefaultJSONProvider
from uuid import UUID
import halrest
from .config import is_debug
from .hal import HAL_MEDIATYPE, Representation


class _HALJSONEncoder:
    """
    JSON encoding for HAL representations and the common column types
    """

    # pylint: disable=too-many-return-statements
    def default(self, obj, **kwargs):
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if obj is None:
            return None
        if isinstance(obj, Representation):
            return obj.to_dict()
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, set):
            return list(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, decimal.Decimal):
            return float(obj)
        if isinstance(obj, bytes):
            if obj == b"":
                return ""
            halrest.log.debug("HALJSONEncoder: serializing bytes obj")
            return obj.hex()

        # We shouldn't get here in a normal setup: the serializer only emits column values
        if not is_debug():
            halrest.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
            return {"error": "HALJSONEncoder invalid object"}

        return str(obj)


class HALJSONProvider(_HALJSONEncoder, DefaultJSONProvider):
    """
    Flask JSON encoding
    """

    mimetype = HAL_MEDIATYPE
    sort_keys = False
