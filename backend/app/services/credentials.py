class CredentialRotator:
    """
    Two interchangeable API keys and a pointer to the active one.
    Callers rotate explicitly on a quota signal; nothing is tracked per key.
    """

    def __init__(self, primary: str, secondary: str):
        self._keys = (primary, secondary)
        self._index = 0

    @property
    def active(self) -> str:
        return self._keys[self._index]

    def rotate(self) -> None:
        self._index = 1 - self._index
