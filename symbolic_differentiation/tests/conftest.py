import sys
from pathlib import Path

import pytest

# Ensure the calculator modules are importable when pytest starts from any directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from expression_tree import Variable  # noqa: E402


@pytest.fixture
def x():
    return Variable("x")


@pytest.fixture
def y():
    return Variable("y")
