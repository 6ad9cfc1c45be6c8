# devnet/__init__.py
# -*- coding: utf-8 -*-
"""
Bootstrap orchestration for a local layered blockchain development network.

Entry point: `devnet.cli:cli` (installed as `devnet-init`, or `python -m devnet`).
"""

__version__ = "0.1.0"
