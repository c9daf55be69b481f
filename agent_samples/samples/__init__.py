"""Sample programs, one console script each (see pyproject.toml)."""
