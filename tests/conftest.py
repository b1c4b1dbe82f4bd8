import pytest

from hybridcrypto.keys import StaticSecretProvider, generate_rsa_keypair
from hybridcrypto.session import SessionStore


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(scope="session")
def keypair():
    """(private_pem, public_pem) shared by the whole run; RSA generation is slow."""
    return generate_rsa_keypair(2048)


@pytest.fixture(scope="session")
def other_keypair():
    return generate_rsa_keypair(2048)


@pytest.fixture
def private_pem(keypair):
    return keypair[0]


@pytest.fixture
def public_pem(keypair):
    return keypair[1]


@pytest.fixture
def secrets(private_pem):
    return StaticSecretProvider(private_pem)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)
