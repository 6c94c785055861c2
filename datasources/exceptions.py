# datasources/exceptions.py

class DataSourceError(Exception):
    pass


class DataSourceUnavailable(DataSourceError):
    pass


class QueryTimeout(DataSourceError):
    pass


class InvalidPayload(DataSourceError):
    pass


class SourceUnavailable(DataSourceError):
    """A cycle could not obtain a complete, valid set of samples."""
