"""Dynamic library loader for the mlpack binding libraries.

Every binding ships in its own shared library (``libmlpack_julia_<name>``),
next to a utility library holding the parameter-set ABI. Some builds link
everything into one combined library instead; both layouts are searched.
"""

import ctypes
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional


__all__ = ['get_lib', 'use_library', 'reset', 'library_names', 'LibraryNotFoundError']

logger = logging.getLogger("mlbind.kernel")


class LibraryNotFoundError(Exception):
    """Raised when an mlpack binding library cannot be found or loaded."""
    pass


# Global library cache, keyed by binding name (None for the utility library)
_lib_cache = {}

# Library injected with use_library(); takes precedence over discovery
_override: Optional[Any] = None

_COMBINED_STEMS = ('mlpack_julia_util', 'mlpack')


def _platform_name(stem: str) -> str:
    if sys.platform == 'win32':
        return f'{stem}.dll'
    elif sys.platform == 'darwin':
        return f'lib{stem}.dylib'
    return f'lib{stem}.so'


def library_names(binding: Optional[str] = None) -> List[str]:
    """Candidate file names for a binding, most specific first.

    Args:
        binding: Binding name such as ``'kmeans'``, or None for the
            utility library only.

    Returns:
        Platform-specific file names to look for.
    """
    stems = []
    if binding is not None:
        stems.append(f'mlpack_julia_{binding}')
    stems.extend(_COMBINED_STEMS)
    return [_platform_name(stem) for stem in stems]


def _search_paths() -> List[Path]:
    """Directories (or a single file) to search, in priority order.

    Search order:
        1. Environment variable: MLBIND_LIBRARY_PATH
        2. Package directory: src/mlbind/libs/
        3. Build directory: build/lib, build/, build/Release
    """
    search_paths = []

    env_value = os.environ.get('MLBIND_LIBRARY_PATH')
    if env_value:
        search_paths.append(Path(env_value))

    package_dir = Path(__file__).parent.parent / 'libs'
    if package_dir.exists():
        search_paths.append(package_dir)

    project_root = Path(__file__).parent.parent.parent.parent
    build_dirs = [
        project_root / 'build' / 'lib',
        project_root / 'build',
        project_root / 'build' / 'Release',
    ]
    search_paths.extend(d for d in build_dirs if d.exists())
    return search_paths


def _find_library(binding: Optional[str]) -> Optional[Path]:
    """Search for the shared library exporting ``binding``'s symbols.

    Returns:
        Path to library file, or None if not found.
    """
    names = library_names(binding)
    for search_path in _search_paths():
        # A file given directly through the environment is a combined library
        if search_path.is_file():
            return search_path
        for name in names:
            lib_path = search_path / name
            if lib_path.exists():
                return lib_path
    return None


def get_lib(binding: Optional[str] = None):
    """Get the library handle for a binding with lazy initialization.

    Libraries are loaded once and cached. Freshly loaded libraries get their
    ``loadSymbols`` hook called, which forces the binding's parameter
    symbols to register with the native parameter system.

    Args:
        binding: Binding name, or None for the utility library.

    Returns:
        ctypes.CDLL library handle (or the object installed by
        :func:`use_library`).

    Raises:
        LibraryNotFoundError: If library cannot be found or loaded.

    Example:
        >>> lib = get_lib('kmeans')
        >>> lib.mlpack_kmeans
    """
    if _override is not None:
        return _override

    if binding in _lib_cache:
        return _lib_cache[binding]

    lib_path = _find_library(binding)
    if lib_path is None:
        raise LibraryNotFoundError(
            f"Cannot find mlpack library for binding '{binding or 'util'}'. "
            f"Please build mlpack's bindings or set MLBIND_LIBRARY_PATH."
        )

    try:
        lib = ctypes.CDLL(str(lib_path))
    except OSError as e:
        raise LibraryNotFoundError(f"Failed to load library from {lib_path}: {e}") from e

    load_symbols = getattr(lib, 'loadSymbols', None)
    if load_symbols is not None:
        load_symbols.argtypes = []
        load_symbols.restype = None
        load_symbols()

    logger.debug("loaded %s for binding %s", lib_path, binding)
    _lib_cache[binding] = lib
    return lib


def use_library(lib) -> None:
    """Route every binding to ``lib``.

    Useful for embedding a process-wide combined library that was loaded by
    other means, and for substituting a stub in tests. Pass None to restore
    normal discovery.
    """
    global _override
    _override = lib
    _lib_cache.clear()


def reset() -> None:
    """Drop cached libraries and any installed override."""
    use_library(None)
