#!/usr/bin/env python3
# app.py – nmpatch direct entry point

from __future__ import annotations

"""
Run the node_modules patch without a build tool.

    cd /path/to/your/frontend
    python3 app.py                      # all defaults: ./node_modules/, '// @ts-nocheck'
    python3 app.py 'vendor/**/*.ts' --ignore '**/keep/**'

Same as `python3 -m nmpatch` or the installed `nmpatch` command.
"""

import sys

from nmpatch.cli import main

if __name__ == "__main__":
    sys.exit(main())
