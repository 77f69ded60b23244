"""
Forgotten Files - Command service for abandoned conversion outputs.

Answers getForgotten, deleteForgotten and getForgottenList commands against
the forgotten-files storage namespace of a document-editing backend.
"""

from forgotten_files.version import __version__

# API module is available but not exported by default
# Import explicitly: from forgotten_files.api import create_app

__all__ = ["__version__"]
