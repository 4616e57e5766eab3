"""constbox: package boundary enforcement for Ruby codebases.

Resolves every constant reference to its defining package and checks it
against the exports and imports each package declares in its ``box.yml``.
"""

__version__ = "0.1.0"
