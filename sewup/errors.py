"""Exceptions raised by the package."""


class SewupError(Exception):
    """Base class of every error raised by the package."""

    default_message = "sewup error"

    def __init__(self, *args):
        super().__init__(*(args or (self.default_message,)))

    def __eq__(self, other):
        if not isinstance(other, SewupError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))


class ContractError(SewupError):
    """Problems with the contract or with its call data."""

    default_message = "contract error"


class CalldataAbsent(ContractError):
    default_message = "calldata is absent"


class CalldataMalformat(ContractError):
    default_message = "the format of calldata is hexaliteral"


class ContractSizeError(ContractError):
    """The call data is too small to hold a function selector."""

    def __init__(self, size):
        self.size = size
        super().__init__(f"the size of contract `{size}` is not correct")


class InsufficientContractInfoError(ContractError):
    default_message = "contract address and call data are both absent"


class HandlerError(SewupError):
    """Errors reported by contract handlers."""

    default_message = "handler error"


class NotFound(HandlerError):
    default_message = "Resource not found"


class Unauthorized(HandlerError):
    default_message = "Authorization has been refused for current caller's credential"


class SizeExcessError(SewupError):
    """Data is larger than the fixed size reserved for it."""

    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"data size excess the limitation `{limit}`")


class BucketAlreadyOpen(SewupError):
    default_message = "bucket already open"


class BucketNotSync(SewupError):
    """A bucket was opened but never saved back to its store."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"bucket `{name}` did not sync, use `safe` before commit")


class RecordDeleted(SewupError):
    default_message = "Record deleted"


class RecordIdIncorrect(SewupError):
    default_message = "Record Id not correct, it starts from 1 not zero"


class RecordNotSized(SewupError):
    default_message = "Record is not fixed, and overflowed"


class TableIsEmpty(SewupError):
    default_message = "No record in table"


class TableNotExist(SewupError):
    """The requested table is not known to the database."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"`{name}` did not exist")