import os
import sys

import pytest


# Ensure the repository root (which contains `src/`) is on sys.path for `from src...` imports
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


@pytest.fixture
def startpos_game():
    from src.engine.game import Game

    return Game.new()
