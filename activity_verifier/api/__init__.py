"""HTTP API layer for the activity verifier.

Usage
-----
Create the application::

    from activity_verifier.api import create_app

    app = create_app()              # probes only
    app = create_app(dependencies)  # probes plus verification routes

"""

from activity_verifier.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
