"""
fairdice.utils
--------------

Light helpers (byte/hex handling) shared across the commit-reveal and
protocol modules. Deliberately avoids eager imports.
"""

__all__: list[str] = []
