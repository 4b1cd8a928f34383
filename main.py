"""Runs SnapText from a source checkout: `python main.py`."""
from snaptext.__main__ import main

if __name__ == '__main__':
    main()
