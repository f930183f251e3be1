from collections.abc import Sequence


class CredentialRotator:
    """Forward-only cursor over the primary provider's credentials.

    A credential that failed is never selected again by the same rotator.
    Once every credential has failed the rotator is exhausted for good.
    """

    def __init__(self, credentials: Sequence[str]) -> None:
        self._credentials = tuple(credentials)
        self._index = 0
        self._exhausted = not self._credentials

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def index(self) -> int:
        """Position of the active credential in the configured order."""
        return self._index

    def __len__(self) -> int:
        return len(self._credentials)

    def current_credential(self) -> str | None:
        if self._exhausted:
            return None
        return self._credentials[self._index]

    def advance(self) -> bool:
        """Move to the next credential; False once none remain."""
        if self._exhausted:
            return False
        if self._index + 1 >= len(self._credentials):
            self._exhausted = True
            return False
        self._index += 1
        return True
