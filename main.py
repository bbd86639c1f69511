# main.py
import sys

from app.player.main import main

if __name__ == "__main__":
    sys.exit(main())
