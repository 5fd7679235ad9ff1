class SnsError(Exception):
    """SNS error"""

    def __str__(self) -> str:
        detail = " ".join(str(arg) for arg in self.args)
        if not detail:
            return self.__doc__
        return f"{self.__doc__} -> {detail}"


class CodecError(SnsError):
    """Account data could not be decoded"""


class AccountTooShortError(CodecError):
    """Account data is shorter than its fixed layout"""


class ContentOverrunError(CodecError):
    """Record content length runs past the end of the account"""


class InvalidTagError(CodecError):
    """Unknown NFT record tag"""


class InvalidCharacterError(CodecError, ValueError):
    """Invalid base58 character"""


class InvalidDomainFormatError(SnsError, ValueError):
    """The domain is malformed"""


class DomainDoesNotExistError(SnsError):
    """Domain does not exist"""


class NoRecordDataError(SnsError):
    """Record account does not exist"""


class RecordMalformedError(SnsError):
    """Record is malformed"""


class InvalidValidationError(SnsError):
    """Wrong validation method"""


class InvalidRightOfAssociationError(SnsError):
    """Invalid right of association"""


class MissingVerifierError(SnsError):
    """A verifier must be supplied for this record"""


class CouldNotFindOwnerError(SnsError):
    """Could not find the owner of the tokenized domain"""


class PdaOwnerNotAllowedError(SnsError):
    """Domain is owned by a program-derived address"""


class InvalidSignatureError(SnsError):
    """Record signature is invalid"""
