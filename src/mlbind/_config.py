"""
mlbind Config - per-call defaults for binding invocations.

Every binding accepts ``points_are_rows``, ``copy_all_inputs`` and
``verbose``. When a call leaves them out, the values come from here.

Example:
    # Global configuration
    mlbind.config.call.verbose = True

    # Local configuration (context manager, thread-local)
    with mlbind.config.local(points_are_rows=False):
        centroids, assignments = mlbind.kmeans(3, data_by_columns)
"""

from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class CallConfig:
    """Defaults applied to binding calls."""
    points_are_rows: bool = True   # host matrices hold one point per row
    copy_all_inputs: bool = False  # lend a private copy instead of the caller's buffer
    verbose: bool = False          # native informational output

    @classmethod
    def from_env(cls) -> "CallConfig":
        """Build defaults from MLBIND_VERBOSE and MLBIND_COPY_INPUTS."""
        return cls(
            verbose=_env_flag('MLBIND_VERBOSE'),
            copy_all_inputs=_env_flag('MLBIND_COPY_INPUTS'),
        )


# =============================================================================
# Global Configuration Manager
# =============================================================================

class MlbindConfig:
    """
    Global configuration manager.

    The global :class:`CallConfig` applies to every thread; ``local()``
    installs an override visible only to the current thread.
    """

    def __init__(self):
        self._global_call = CallConfig.from_env()
        self._local = threading.local()

    @property
    def call(self) -> CallConfig:
        """Get the call configuration in effect for this thread."""
        override = getattr(self._local, "call", None)
        if override is not None:
            return override
        return self._global_call

    @call.setter
    def call(self, value: CallConfig):
        """Set the global call configuration."""
        self._global_call = value

    @contextmanager
    def local(self, **overrides) -> Iterator[CallConfig]:
        """
        Temporarily override call defaults for this thread.

        Args:
            **overrides: Fields of :class:`CallConfig`.

        Example:
            with mlbind.config.local(verbose=True):
                mlbind.pca(data)
        """
        previous = getattr(self._local, "call", None)
        self._local.call = replace(self.call, **overrides)
        try:
            yield self._local.call
        finally:
            self._local.call = previous

    def reset(self) -> None:
        """Restore defaults read from the environment."""
        self._global_call = CallConfig.from_env()
        self._local.call = None


config = MlbindConfig()
