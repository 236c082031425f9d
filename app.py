# Launcher for the probe API; `mcprobe` / `python -m mcprobe` do the same once installed
import sys

from mcprobe.cli import main

if __name__ == '__main__':
    sys.exit(main())
