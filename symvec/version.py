# symvec/version.py
"""
symvec Version Information

Version components and package metadata. The package follows semantic
versioning (MAJOR.MINOR.PATCH).
"""

# Version components
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Package metadata
__title__ = "symvec"
__description__ = "Elimination, commutation and duplication matrices, sign indicators and safe inverses"
__license__ = "MIT"
