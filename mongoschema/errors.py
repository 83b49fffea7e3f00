class MongoSchemaError(Exception):
    """
    Base exception for all mongoschema errors
    """
    pass


class EmptySourceError(MongoSchemaError):
    """
    Raised when the document source has no documents.
    Informational: callers report it and exit successfully.
    """
    def __init__(self, message: str = "Collection is empty. No schema generated."):
        super().__init__(message)


class SourceUnavailableError(MongoSchemaError):
    """
    Raised when documents cannot be read (connection, auth, bad file)
    """
    pass


class ConfigurationError(MongoSchemaError):
    """
    Raised when run options are invalid
    """
    pass
