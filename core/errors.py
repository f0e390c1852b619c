class PostParseError(ValueError):
    """
    Raised when a post file has no usable front matter.
    """

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
