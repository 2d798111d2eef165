# topmark:header:start
#
#   project      : Probity
#   file         : __main__.py
#   file_relpath : src/probity/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running Probity via ``python -m probity``.

It delegates directly to :func:`probity.cli.main.cli`, ensuring a single,
authoritative CLI entry point regardless of how Probity is launched.

Examples:
    Analyse a source tree using the module interface::

        python -m probity analyse src
"""

from __future__ import annotations

from probity.cli.main import cli

if __name__ == "__main__":
    # We call the Click group directly
    cli()
