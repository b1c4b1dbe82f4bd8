from hybridcrypto.keys import EnvSecretProvider, SecretProvider

from .config import PRIVATE_KEY_ENV

_env_secrets = EnvSecretProvider(PRIVATE_KEY_ENV)

# makes the private key source injectable (tests override this dependency)
def get_secret_provider() -> SecretProvider:
    return _env_secrets
