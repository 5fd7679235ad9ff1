import os
import sys

import pytest
from solders.keypair import Keypair

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from account_builders import FakeConnection  # noqa: E402


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def owner_keypair():
    return Keypair()
