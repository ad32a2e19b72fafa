"""
mfdeps version information.

Read by the CLI ``--version`` option, the HTTP User-Agent and the
startup error report of ``python -m mfdeps``. Keep in sync with
``pyproject.toml``.
"""

__version__ = "0.2.0"
