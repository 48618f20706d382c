from __future__ import annotations

from embedfiles.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
