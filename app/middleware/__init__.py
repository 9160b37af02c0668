"""Request/response middleware installed by create_app()."""
