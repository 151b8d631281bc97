"""Runtime package.

Keep this module dependency-light: importing `relay.runtime.*` from unit
tests should not start any background task.
"""

__all__: list[str] = []
