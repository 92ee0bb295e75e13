"""exceptions
"""


class ResourceError(OSError):
    """a required ISA table could not be opened or read.

    assembly of the ISA model is aborted: there is no partial model.
    """
    def __init__(self, resource, cause):
        self.resource = resource
        self.cause = cause
        super().__init__(f"failed to load {resource}: {cause}")

    def __reduce__(self):
        return (self.__class__, (self.resource, self.cause))


class EncodingError(ValueError):
    """an operand encoding descriptor produced no decode steps"""
    pass
