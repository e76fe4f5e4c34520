"""
Exceptions for the sste crypto facade.
All of them derive from CryptoError so callers can have one general catcher.
"""


class CryptoError(Exception):
    # general container for crypto errors
    pass


class InvalidLengthError(CryptoError):
    # raised when a key, nonce, salt or ciphertext has the wrong size

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Input {field} is invalid length")


class DecryptionFailedError(CryptoError):
    # raised when the authentication tag is rejected; carries no detail

    def __init__(self):
        super().__init__("Decryption failed")


class EngineFailureError(CryptoError):
    # raised when the primitive engine fails on otherwise valid input

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Primitive engine operation {operation} failed")
