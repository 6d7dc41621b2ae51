"""
Exceptions for JournalSeal
Every stage of a submission raises one of these; the controller catches them
at the stage boundary and turns them into the error state.
"""


class JournalSealError(Exception):
    # general container for errors
    pass


class ValidationError(JournalSealError):
    # raised when a required field is missing or a setting is malformed
    pass


class NormalizationError(JournalSealError):
    # raised when a document cannot be turned into a sendable byte stream
    pass


class KeyDerivationError(JournalSealError):
    # raised when the KDF primitive rejects its parameters
    pass


class EncryptionError(JournalSealError):
    # raised on bad key/nonce length or when the cipher rejects the input
    pass


class DecryptionError(EncryptionError):
    # raised when the tag does not verify (wrong password or tampered data)
    pass


class ContainerFormatError(JournalSealError):
    # raised when a container cannot be packed or split at its fixed offsets
    pass


class TransportError(JournalSealError):
    # raised on network failure or a malformed acknowledgment
    pass


class SubmissionInProgressError(JournalSealError):
    # raised when submit() is called while a pipeline is already running
    pass
