#!/usr/bin/env python3
"""
Stride Agent - free-text commands for the DevStride tracker

Development entry point; the installed console script is ``stride-agent``.
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from stride_agent.main import main


if __name__ == "__main__":
    sys.exit(main())
