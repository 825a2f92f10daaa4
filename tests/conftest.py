"""
Pytest configuration and shared fixtures for the session and localization core.
"""
import asyncio

import pytest

from core import runtime
from core.identity import Identity, IdentityChannel
from core.logger import ContextLogger, set_default_logger


ALICE = Identity(uid="uid-alice-0001", email="alice@veridic.fr", display_name="Alice")
BOB = Identity(uid="uid-bob-0002", email="bob@veridic.fr", display_name="Bob")


class DeferredProfileStore:
    """ProfileStore whose lookups stay pending until the test settles them"""

    def __init__(self):
        self.calls = []

    async def get_profile(self, uid):
        future = asyncio.get_running_loop().create_future()
        self.calls.append((uid, future))
        return await future

    def settle(self, index, profile=None):
        self.calls[index][1].set_result(profile)

    def fail(self, index, error):
        self.calls[index][1].set_exception(error)


async def run_pending(rounds: int = 5):
    """Give scheduled tasks a few loop iterations to progress"""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def clean_runtime():
    """Fresh secrets, session and default logger for every test"""
    runtime.init(secrets={}, session={})
    set_default_logger(None)
    yield
    runtime.init(secrets={}, session={})
    set_default_logger(None)


@pytest.fixture
def quiet_logger():
    """Verbose logger that does not echo to stdout"""
    return ContextLogger(name="veridic.test", verbose=True, echo=False)


@pytest.fixture
def channel():
    return IdentityChannel()


@pytest.fixture
def deferred_profiles():
    return DeferredProfileStore()
