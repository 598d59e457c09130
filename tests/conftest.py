"""Pytest configuration and shared fixtures for soapreply tests."""

import io
from collections.abc import Callable
from http import HTTPStatus
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import yaml
from pydantic import Field
from requests import Response

from soapreply import XmlPayload
from soapreply.utils import SoapReplyConfig

ResponseFactory = Callable[..., Response]


class ResultReply(XmlPayload):
    """Payload of the minimal success envelope used across tests."""

    result: int = Field(alias='Result')


class FailingStream(io.BytesIO):
    """A body stream whose connection drops on the first read."""

    def read(self, size: int | None = -1, /) -> bytes:
        raise ConnectionResetError('connection reset by peer')


def build_response(
    status_code: int,
    body: bytes | io.BytesIO = b'',
    reason: str | None = None,
) -> Response:
    """
    Build a real requests.Response over an in-memory body.

    ``close`` is wrapped in a Mock so tests can count calls while the real
    method still runs.
    """
    response = Response()
    response.status_code = status_code
    response.reason = reason if reason is not None else HTTPStatus(status_code).phrase
    response.raw = body if isinstance(body, io.BytesIO) else io.BytesIO(body)
    response.close = Mock(wraps=response.close)  # type: ignore[method-assign]
    return response


@pytest.fixture
def make_response() -> ResponseFactory:
    """Factory fixture returning build_response."""
    return build_response


@pytest.fixture
def success_body() -> bytes:
    """Scenario A: a success envelope with a single integer result."""
    return b'<Envelope><Body><Result>42</Result></Body></Envelope>'


@pytest.fixture
def fault_body() -> bytes:
    """Scenario B: an unauthorized SOAP 1.2 fault without namespaces."""
    return (
        b'<Envelope><Body><Fault>'
        b'<Code><Value>s:Sender</Value>'
        b'<Subcode><Value>ter:NotAuthorized</Value></Subcode></Code>'
        b'<Reason><Text xml:lang="en">Invalid username or password!</Text></Reason>'
        b'</Fault></Body></Envelope>'
    )


@pytest.fixture
def namespaced_fault_body() -> bytes:
    """The same fault as sent by a device, with SOAP 1.2 namespaces."""
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<s:Envelope xmlns:s="http://www.w3.org/2003/05/soap-envelope"
            xmlns:ter="http://www.onvif.org/ver10/error">
    <s:Body>
        <s:Fault>
            <s:Code>
                <s:Value>s:Sender</s:Value>
                <s:Subcode><s:Value>ter:ActionNotSupported</s:Value></s:Subcode>
            </s:Code>
            <s:Reason>
                <s:Text xml:lang="en">Optional Action Not Implemented</s:Text>
            </s:Reason>
        </s:Fault>
    </s:Body>
</s:Envelope>"""


@pytest.fixture
def sample_config() -> SoapReplyConfig:
    """Create a sample SoapReplyConfig for testing."""
    config_dict: dict[str, Any] = {
        'decoder': {
            'read_timeout': 5.0,
            'chunk_size': 4,
        },
        'logging': {
            'console_level': 'INFO',
            'file_level': 'DEBUG',
            'file_path': 'test_soapreply.log',
        },
    }
    return SoapReplyConfig.model_validate(config_dict)


@pytest.fixture
def temp_config_file(tmp_path: Path, sample_config: SoapReplyConfig) -> Path:
    """Create a temporary config file for testing."""
    config_path: Path = tmp_path / 'config.yaml'
    config_dict: dict[str, Any] = sample_config.model_dump(mode='json')
    config_path.write_text(yaml.safe_dump(config_dict, sort_keys=False))
    return config_path
