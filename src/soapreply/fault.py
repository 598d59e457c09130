# soapreply/fault.py
"""
Result variants of a decoded SOAP reply.

A reply decodes to exactly one of:

- ``Success[PayloadT]``: no fault, the body was decoded into the caller's
  payload model.
- ``Fault``: the endpoint reported a protocol-level fault, or answered with a
  non-200 HTTP status.

Sample fault body (SOAP 1.2, as sent by ONVIF devices)::

    <s:Fault>
      <s:Code>
        <s:Value>s:Sender</s:Value>
        <s:Subcode><s:Value>ter:NotAuthorized</s:Value></s:Subcode>
      </s:Code>
      <s:Reason><s:Text xml:lang="en">Sender not Authorized</s:Text></s:Reason>
    </s:Fault>
"""

from typing import Generic, NoReturn, TypeVar

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import RemoteFaultError
from .payload import XmlPayload
from .utils.xml_tools import find_child

PayloadT = TypeVar('PayloadT', bound=XmlPayload)

HTTP_OK: int = 200


def _raw_text(fault_element: etree._Element, path: str) -> str:
    # Unstripped: whitespace-only Code/Value still marks a fault
    child: etree._Element | None = find_child(fault_element, path)
    if child is None or child.text is None:
        return ''
    return child.text


class Fault(BaseModel):
    """
    Protocol-level error carried by an HTTP response.

    Attributes:
        status_code: HTTP status of the transport response. Never read from
                     the XML body.
        code: Top-level classification, from ``Code/Value``.
        subcode: Finer classification (``NotAuthorized``,
                 ``ActionNotSupported``, ...), from ``Code/Subcode/Value``.
        reason: Human-readable explanation, from ``Reason/Text``.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., description='HTTP status of the response')
    code: str = Field('', description='Fault code, e.g. s:Sender')
    subcode: str = Field('', description='Fault subcode, e.g. ter:NotAuthorized')
    reason: str = Field('', description='Fault reason text')

    @classmethod
    def from_envelope(
        cls, root: etree._Element | None, status_code: int
    ) -> 'Fault':
        """
        Build a Fault from the ``Body/Fault`` element of a parsed envelope.

        The name of the root element is not checked. When there is no
        document or no ``Body/Fault``, the fault only carries the status code.

        Args:
            root: The parsed document root, or None for an empty body.
            status_code: The HTTP status of the response.

        Returns:
            A Fault; check ``is_present`` to know if it signals an error.
        """
        fault_element: etree._Element | None = (
            find_child(root, 'Body/Fault') if root is not None else None
        )

        if fault_element is None:
            return cls(status_code=status_code)

        return cls(
            status_code=status_code,
            code=_raw_text(fault_element, 'Code/Value'),
            subcode=_raw_text(fault_element, 'Code/Subcode/Value'),
            reason=_raw_text(fault_element, 'Reason/Text'),
        )

    @property
    def is_present(self) -> bool:
        """True if the reply must be treated as a fault."""
        return self.status_code != HTTP_OK or len(self.code) > 0

    @property
    def message(self) -> str:
        return (
            f'http-status: {self.status_code}, '
            f'code: {self.code}/{self.subcode}, '
            f'detail: {self.reason}'
        )

    def unwrap(self) -> NoReturn:
        """Raise the fault as a RemoteFaultError."""
        raise RemoteFaultError(self)

    def __str__(self) -> str:
        return self.message


class Success(BaseModel, Generic[PayloadT]):
    """
    A reply without fault, decoded into the caller's payload model.

    Attributes:
        payload: The populated payload model instance.
    """

    model_config = ConfigDict(frozen=True)

    payload: PayloadT

    def unwrap(self) -> PayloadT:
        """Return the decoded payload."""
        return self.payload


# Either outcome of ResponseDecoder.decode(), for isinstance checks and
# unparameterised annotations. Typed call sites use Success[PayloadT] | Fault.
DecodeResult = Success | Fault
