#!/usr/bin/env python3
"""
Entry point for Wiener's attack.
Run with `python run.py [args]`
i.e. `python run.py -h` for help.
"""

if __name__ == "__main__":
    from wiener import attack
    attack._main()
