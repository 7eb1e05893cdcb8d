# base.py: implements the HALBase SQLAlchemy model mixin
#
"""
HALBase customizable methods, override these in the model to customize the behavior of the data-access layer.

_hal_validate:
Type: method
Description: Called before an item is saved, returns the list of validation messages (empty if the item is valid).


_hal_before_destroy:
Type: method
Description: Called before an item is destroyed, return False to refuse the deletion.
"""
from typing import List
import sqlalchemy
from sqlalchemy.orm import ColumnProperty


def humanize(name: str) -> str:
    """
    :param name: attribute name, e.g. "first_name"
    :return: name used in messages, e.g. "First name"
    """
    return name.replace("_", " ").strip().capitalize()


def validate_columns(instance) -> List[str]:
    """
    Check the column constraints that can be verified without hitting the database:
    non-nullable columns must have a value and string values must fit the column length

    :param instance: sqla model instance
    :return: validation messages
    """
    messages = []
    for attr in sqlalchemy.inspect(type(instance)).attrs:
        if not isinstance(attr, ColumnProperty):
            continue
        column = attr.columns[0]
        value = getattr(instance, attr.key, None)
        if value is None:
            if column.nullable or column.primary_key or column.default is not None or column.server_default is not None:
                continue
            if column.foreign_keys:
                # foreign keys are set when the relationships are flushed
                continue
            messages.append(f"{humanize(attr.key)} must not be blank")
            continue
        length = getattr(column.type, "length", None)
        if length and isinstance(value, str) and len(value) > length:
            messages.append(f"{humanize(attr.key)} must be at most {length} characters long")
    return messages


class HALBase:
    """This mixin implements the validation and destroy hooks used by the halrest data-access layer

    Models don't have to inherit from HALBase to be exposed: the column constraints are
    validated for any mapped class. Subclasses can extend `_hal_validate` with their own rules:

        class Book(HALBase, DB.Model):
            ...
            def _hal_validate(self):
                messages = super()._hal_validate()
                if self.title == "untitled":
                    messages.append("Title must be set")
                return messages
    """

    # messages of the last failed save
    _hal_errors = ()

    def _hal_validate(self) -> List[str]:
        """
        :return: validation messages, empty if the instance may be saved
        """
        return validate_columns(self)

    def _hal_before_destroy(self) -> bool:
        """
        :return: False if the instance may not be deleted
        """
        return True
