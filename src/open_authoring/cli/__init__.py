"""open-authoring CLI.

Subcommand groups:
- auth: Access token management
- fork: Fork registry
"""

from open_authoring.cli.main import app, main

__all__ = ["app", "main"]
