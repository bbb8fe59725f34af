"""
Setup script for mlbind

This setup.py is primarily for compatibility. The main configuration is in pyproject.toml.
However, this script handles:
1. Locating prebuilt mlpack binding libraries (libmlpack_julia_*)
2. Copying them into src/mlbind/libs/ before packaging, so wheels are self-contained

mlpack itself is not built here. Point MLPACK_LIB_DIR at the directory holding
its binding libraries, or leave them in build/lib/ or build/.
"""

import os
import sys
import shutil
from pathlib import Path
from setuptools import setup
from setuptools.command.build_py import build_py
from setuptools.command.develop import develop


TARGET_DIR = Path("src/mlbind/libs")

# Per-binding libraries plus the combined builds the loader also accepts
LIB_PATTERNS = ["mlpack_julia_*", "mlpack"]


def _extension():
    if os.name == 'nt':  # Windows
        return ".dll"
    elif sys.platform == 'darwin':  # macOS
        return ".dylib"
    return ".so"  # Linux


def _candidate_dirs():
    dirs = []
    env_dir = os.environ.get("MLPACK_LIB_DIR")
    if env_dir:
        dirs.append(Path(env_dir))
    dirs.extend([Path("build/lib"), Path("build")])
    return dirs


def copy_mlpack_libs():
    """Copy prebuilt mlpack binding libraries into the package.

    Returns:
        Number of libraries copied.
    """
    ext = _extension()
    prefix = "" if ext == ".dll" else "lib"
    TARGET_DIR.mkdir(parents=True, exist_ok=True)

    copied_count = 0
    for build_dir in _candidate_dirs():
        if not build_dir.is_dir():
            continue
        for pattern in LIB_PATTERNS:
            for src in sorted(build_dir.glob(f"{prefix}{pattern}{ext}")):
                dst = TARGET_DIR / src.name
                shutil.copy2(src, dst)
                print(f"✓ Copied {src.name} -> {dst}")
                copied_count += 1
        # First directory holding libraries wins
        if copied_count > 0:
            break

    if copied_count == 0:
        print("=" * 60)
        print("WARNING: No mlpack binding libraries found!")
        print("=" * 60)
        print("Searched in:")
        for build_dir in _candidate_dirs():
            print(f"  - {build_dir.absolute()}")
        print("\nThe package will fall back to MLBIND_LIBRARY_PATH at runtime.")
        print("=" * 60)
    return copied_count


class BuildPyWithLibs(build_py):
    """Custom build command that copies the mlpack libraries into the package."""

    def run(self):
        copy_mlpack_libs()
        super().run()


class DevelopWithLibs(develop):
    """Custom develop command that copies the mlpack libraries for editable installs."""

    def run(self):
        copy_mlpack_libs()
        super().run()


# Configuration is primarily in pyproject.toml
# This setup.py only handles library copying
setup(
    cmdclass={
        "build_py": BuildPyWithLibs,
        "develop": DevelopWithLibs,
    },
    zip_safe=False,  # Cannot be zipped due to shared libraries
)
