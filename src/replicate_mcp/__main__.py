"""Enables execution via: python -m replicate_mcp"""

from replicate_mcp.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
