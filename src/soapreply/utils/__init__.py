# soapreply/utils/__init__.py

from .config_loader import DecoderSection, LoggingSection, SoapReplyConfig, load_config
from .logger import setup_logger
from .xml_tools import (
    extract_text,
    find_child,
    find_children,
    find_envelope_body,
    is_nil,
    local_name,
    parse_xml_bytes,
    parse_xml_to_dict,
)

__all__: list[str] = [
    # config_loader.py
    'DecoderSection',
    'LoggingSection',
    'SoapReplyConfig',
    # xml_tools.py
    'extract_text',
    'find_child',
    'find_children',
    'find_envelope_body',
    'is_nil',
    'load_config',
    'local_name',
    'parse_xml_bytes',
    'parse_xml_to_dict',
    # logger.py
    'setup_logger',
]
