# soapreply/decoder.py
"""
Response decoder for SOAP RPC replies.

The decoder takes a completed HTTP response and turns it into either a
``Fault`` or a ``Success`` holding the caller's payload model. It does not
send requests, retry, or pool connections; that belongs to the transport.

Decision procedure, applied once per response:

1. Log one DEBUG 'RPC' event (status line, status code, operation).
2. Read the whole body, bounded by the read deadline.       -> ReadError
3. Close the response, whatever happens next.
4. Parse the body as an envelope and extract the fault.     -> FaultDecodeError
5. Non-200 status or non-empty fault code: return the Fault.
6. Otherwise decode the body into the payload model.        -> PayloadDecodeError
"""

import logging
import time
from collections.abc import Iterator
from typing import Any, Protocol

import requests
from lxml import etree

from .exceptions import FaultDecodeError, PayloadDecodeError, ReadError
from .fault import HTTP_OK, Fault, PayloadT, Success
from .utils.config_loader import DecoderSection
from .utils.xml_tools import find_envelope_body, parse_xml_bytes

# Marks an omitted timeout; None is a valid value meaning "no deadline"
CONFIG_TIMEOUT: Any = object()


class HttpReply(Protocol):
    """The part of ``requests.Response`` the decoder relies on."""

    status_code: int
    reason: str

    def iter_content(self, chunk_size: int = ...) -> Iterator[bytes]: ...

    def close(self) -> None: ...


class ResponseDecoder:
    """
    Decodes SOAP replies into faults or payload models.

    A decoder only holds its configuration and a logger, so one instance can
    be shared by any number of threads as long as each call gets its own
    response.

    Attributes:
        config: Read settings (deadline and chunk size).
        logger: Destination of the per-call 'RPC' debug events.

    Usage:
        >>> decoder = ResponseDecoder()
        >>> result = decoder.decode(response, GetDeviceInformationResponse, 'GetDeviceInformation')
        >>> if isinstance(result, Fault):
        ...     print(result.subcode)
        >>> info = result.unwrap()  # raises RemoteFaultError on a fault
    """

    def __init__(
        self,
        config: DecoderSection | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config: DecoderSection = config if config is not None else DecoderSection()
        self.logger: logging.Logger = (
            logger if logger is not None else logging.getLogger(__name__)
        )

    def decode(
        self,
        response: HttpReply,
        payload_type: type[PayloadT],
        operation: str,
        timeout: float | None = CONFIG_TIMEOUT,
    ) -> Success[PayloadT] | Fault:
        """
        Decode one HTTP response.

        The response is closed exactly once before this method returns or
        raises. ``payload_type`` is only used when no fault is detected.

        Args:
            response: The completed HTTP response (e.g. from requests.post).
            payload_type: The XmlPayload subclass describing a successful reply.
            operation: Name of the RPC operation, used for logging only.
            timeout: Read deadline in seconds. When omitted, config.read_timeout
                     applies; None disables the deadline for this call.

        Returns:
            A Fault if the endpoint reported one (or answered non-200),
            otherwise a Success wrapping a populated payload_type instance.

        Raises:
            ReadError: If the body could not be read within the deadline.
            FaultDecodeError: If a 200 reply is not well-formed XML.
            PayloadDecodeError: If the reply does not fit payload_type.
        """
        status_code: int = response.status_code
        status_line: str = _status_line(response)
        self.logger.debug(
            'RPC %r status=%d action=%s',
            status_line,
            status_code,
            operation,
            extra={
                'rpc_status_line': status_line,
                'rpc_status': status_code,
                'rpc_action': operation,
            },
        )

        try:
            body: bytes = self._read_body(response, timeout)
        finally:
            response.close()

        fault: Fault = self._decode_fault(body, status_code, operation)
        if fault.is_present:
            return fault

        return Success(payload=self._decode_payload(body, payload_type, operation))

    def _read_body(self, response: HttpReply, timeout: float | None) -> bytes:
        """
        Read the full body, checking the deadline between chunks.

        Raises:
            ReadError: On transport errors or when the deadline passes.
        """
        if timeout is CONFIG_TIMEOUT:
            timeout = self.config.read_timeout
        deadline: float | None = (
            time.monotonic() + timeout if timeout is not None else None
        )

        chunks: list[bytes] = []
        try:
            for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                chunks.append(chunk)
                if deadline is not None and time.monotonic() > deadline:
                    raise TimeoutError(f'body not read within {timeout}s')
        except (requests.exceptions.RequestException, OSError) as read_error:
            raise ReadError(read_error) from read_error

        return b''.join(chunks)

    def _decode_fault(self, body: bytes, status_code: int, operation: str) -> Fault:
        """
        Extract the fault information of a reply.

        A reply that is not well-formed XML is an error on a 200, but for any
        other status the status itself is the fault and the body is ignored.
        """
        try:
            root: etree._Element | None = parse_xml_bytes(body)
        except etree.XMLSyntaxError as syntax_error:
            if status_code == HTTP_OK:
                raise FaultDecodeError(syntax_error) from syntax_error
            self.logger.debug(
                'Unparseable body for %s (HTTP %d): %s',
                operation,
                status_code,
                syntax_error,
            )
            return Fault(status_code=status_code)

        return Fault.from_envelope(root, status_code)

    def _decode_payload(
        self, body: bytes, payload_type: type[PayloadT], operation: str
    ) -> PayloadT:
        """Decode a fault-free reply into payload_type."""
        # Already parsed once without error in _decode_fault
        root: etree._Element | None = parse_xml_bytes(body)
        if root is None:
            raise PayloadDecodeError(ValueError('empty response body'))

        body_element: etree._Element | None = find_envelope_body(root)
        if body_element is None:
            body_element = root

        try:
            return payload_type.from_xml_element(body_element)
        except ValueError as validation_error:
            self.logger.debug(
                'Reply to %s does not fit %s', operation, payload_type.__name__
            )
            raise PayloadDecodeError(validation_error) from validation_error


def _status_line(response: HttpReply) -> str:
    return f'{response.status_code} {response.reason or ""}'.rstrip()


def decode_response(
    response: HttpReply,
    payload_type: type[PayloadT],
    operation: str,
    timeout: float | None = CONFIG_TIMEOUT,
) -> Success[PayloadT] | Fault:
    """Decode a response with a default-configured ResponseDecoder."""
    return ResponseDecoder().decode(response, payload_type, operation, timeout)
