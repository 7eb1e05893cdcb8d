__version__ = "0.3.0"
__description__ = "halrest : SqlAlchemy Flask-Restful HAL resources"
