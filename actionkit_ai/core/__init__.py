"""Ambient services shared by the action core and the generate package.

- ``config``: pydantic-settings bound from the environment and ``.env``.
- ``logging_config``: explicit ``setup_logging()`` and ``get_logger()``.
- ``monitoring``: Logfire initialization and per-action metrics.
"""
