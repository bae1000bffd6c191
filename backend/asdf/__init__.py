"""ASDF services backend.

Service container, composition root and the shared core infrastructure
(configuration, errors, logging) used by the ASDF site and arcade.
"""

__version__ = "1.0.0"
