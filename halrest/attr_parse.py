import datetime
import decimal
import halrest
import sqlalchemy


def parse_attr(column, attr_val):
    """
    Parse the supplied `attr_val` so it can be saved in the SQLAlchemy `column`
    Request parameters may be strings (form data) or json values

    :param column: SQLAlchemy column
    :param attr_val: request parameter value
    :return: processed value
    :raises ValueError: if the value can't be converted to the column type
    """
    if attr_val is None and column.default is not None and not callable(column.default.arg):
        return column.default.arg

    if attr_val is None:
        return attr_val

    try:
        python_type = column.type.python_type
    except NotImplementedError as exc:
        """
        This happens when a custom type has been implemented, in which case the user/dev should know how to handle it:
        simply return the attr_val for user-defined classes
        """
        halrest.log.debug(exc)
        return attr_val

    # skip type coercion on JSON columns, since they could be anything
    if isinstance(column.type, sqlalchemy.types.JSON):
        return attr_val

    if isinstance(attr_val, python_type) and not (python_type is int and isinstance(attr_val, bool)):
        return attr_val

    # dicts and lists only fit JSON columns
    if isinstance(attr_val, (dict, list)):
        raise ValueError(f"invalid {python_type.__name__} {attr_val!r}")

    """
        Parse datetime and date values for some common representations
        If another format is used, the user should create a custom column type
    """
    if python_type == datetime.datetime:
        return datetime.datetime.fromisoformat(str(attr_val))
    if python_type == datetime.date:
        return datetime.date.fromisoformat(str(attr_val))
    if python_type == datetime.time:
        return datetime.time.fromisoformat(str(attr_val))
    if python_type == bool:
        if isinstance(attr_val, str):
            if attr_val.lower() in ("1", "true", "yes", "on"):
                return True
            if attr_val.lower() in ("0", "false", "no", "off"):
                return False
            raise ValueError(f"invalid boolean {attr_val!r}")
        return bool(attr_val)
    if python_type == decimal.Decimal:
        try:
            return decimal.Decimal(str(attr_val))
        except decimal.InvalidOperation:
            raise ValueError(f"invalid decimal {attr_val!r}")
    if python_type in (int, str) and isinstance(attr_val, bool):
        raise ValueError(f"invalid {python_type.__name__} {attr_val!r}")
    if python_type == int and isinstance(attr_val, float):
        if not attr_val.is_integer():
            raise ValueError(f"invalid integer {attr_val!r}")
        return int(attr_val)

    return python_type(attr_val)
