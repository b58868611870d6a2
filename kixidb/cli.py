# kixidb/cli.py
import sys

from .bootstrap_db import main


def db():
    sys.exit(main())
