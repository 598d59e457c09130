# soapreply/__init__.py

from .decoder import ResponseDecoder, decode_response
from .exceptions import (
    DecodeError,
    FaultDecodeError,
    PayloadDecodeError,
    ReadError,
    RemoteFaultError,
    SoapReplyError,
)
from .fault import DecodeResult, Fault, Success
from .payload import XmlPayload

__all__: list[str] = [
    # exceptions.py
    'DecodeError',
    # fault.py
    'DecodeResult',
    'Fault',
    'FaultDecodeError',
    'PayloadDecodeError',
    'ReadError',
    'RemoteFaultError',
    # decoder.py
    'ResponseDecoder',
    'SoapReplyError',
    'Success',
    # payload.py
    'XmlPayload',
    'decode_response',
]
