# devnet/__main__.py
# -*- coding: utf-8 -*-
from devnet.cli import cli

if __name__ == "__main__":
    cli(prog_name="devnet-init")
