# soapreply/exceptions.py
"""
Error taxonomy for decoding SOAP RPC responses.

Every error names the decoding phase that failed. The phase is prefixed to the
message so that a single line in a log tells where the reply went wrong, e.g.
``'decode fault info: Opening and ending tag mismatch ...'``.

A remote fault is not an exception at decode time: it is returned as a
``Fault`` value. ``RemoteFaultError`` only exists for callers that prefer to
raise, via ``Fault.unwrap()``.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from soapreply.fault import Fault


class SoapReplyError(Exception):
    """Base class for all soapreply errors."""

    phase: str = ''

    def __init__(self, cause: object) -> None:
        self.cause: object = cause
        message: str = f'{self.phase}: {cause}' if self.phase else str(cause)
        super().__init__(message)


class ReadError(SoapReplyError):
    """The response body could not be fully read from the transport."""

    phase = 'read'


class DecodeError(SoapReplyError):
    """The response body could not be parsed."""


class FaultDecodeError(DecodeError):
    """The body is not even a well-formed envelope."""

    phase = 'decode fault info'


class PayloadDecodeError(DecodeError):
    """The body carries no fault but does not fit the expected payload."""

    phase = 'decode'


class RemoteFaultError(SoapReplyError):
    """
    Raised by ``Fault.unwrap()`` to turn a returned fault into an exception.

    Attributes:
        fault: The fault reported by the remote endpoint.
    """

    def __init__(self, fault: 'Fault') -> None:
        self.fault: 'Fault' = fault
        super().__init__(fault.message)
