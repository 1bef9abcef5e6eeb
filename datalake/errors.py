"""
Declaration-time errors
"""


class ConfigurationError(ValueError):
    """Raised while building the graph, before any resource is registered"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")
