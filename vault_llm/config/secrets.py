"""Credential storage collaborators."""

from abc import ABC, abstractmethod


class SecretStore(ABC):
    """Maps a credential to the opaque token kept in the configuration record and back."""

    @abstractmethod
    def conceal(self, secret: str) -> str:
        """
        Turn a credential into a storable token.

        Args:
            secret: Plain credential

        Returns:
            Token safe to persist in the configuration record
        """
        pass

    @abstractmethod
    def reveal(self, token: str) -> str:
        """
        Recover the credential from a stored token.

        Args:
            token: Token previously produced by conceal

        Returns:
            Plain credential, or an empty string when the token cannot be read
        """
        pass


class PlaintextSecretStore(SecretStore):
    """Stores credentials unchanged.

    Offers no protection at rest; deployments that need it plug in their own
    SecretStore (OS keyring, vault service, ...).
    """

    def conceal(self, secret: str) -> str:
        return secret or ""

    def reveal(self, token: str) -> str:
        return token or ""
