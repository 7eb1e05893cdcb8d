# Response class
from flask import Response
from .hal import HAL_MEDIATYPE


class HALResponse(Response):
    """
    Response class, HAL documents are the default
    """

    default_mimetype = HAL_MEDIATYPE
