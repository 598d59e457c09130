# soapreply/utils/xml_tools.py
"""
XML helpers for SOAP replies.

Parsing goes through lxml with a parser that neither resolves entities nor
touches the network. Lookups match on local names only, so a ``<s:Body>``,
a ``<soapenv:Body>`` and a bare ``<Body>`` are the same element to the
decoder.

``parse_xml_to_dict`` bridges the lxml tree and the pydantic payload models:
it introspects a model class to know which child elements to read and returns
a plain dictionary ready for ``model_validate()``.
"""
# pyright: reportUnknownVariableType=false, reportUnknownMemberType=false, reportAttributeAccessIssue=false, reportUnknownParameterType=false, reportUnknownArgumentType=false

import logging
import types
from typing import Any, Union, get_args, get_origin

from lxml import etree
from pydantic import BaseModel

logger: logging.Logger = logging.getLogger(__name__)

XSI_NIL: str = '{http://www.w3.org/2001/XMLSchema-instance}nil'


def _build_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
    )


def parse_xml_bytes(data: bytes) -> etree._Element | None:
    """
    Parse raw reply bytes into an lxml element.

    Args:
        data: The complete response body.

    Returns:
        The document root, or None when the body is empty or whitespace only.

    Raises:
        etree.XMLSyntaxError: If the body is not well-formed XML.
    """
    if not data.strip():
        return None

    # A fresh parser per call: lxml parsers are not safe to share across threads
    return etree.fromstring(data, parser=_build_parser())


def local_name(element: etree._Element) -> str:
    """Return the tag of an element without its namespace."""
    tag: Any = element.tag
    if not isinstance(tag, str):
        # Comments and processing instructions
        return ''
    return etree.QName(tag).localname


def _split_path(path: str) -> list[str]:
    return [step for step in path.split('/') if step]


def find_children(element: etree._Element, path: str) -> list[etree._Element]:
    """
    Find every element matching a ``/``-separated path of local names.

    Only direct children are considered at each step, e.g. ``'Code/Value'``
    does not match ``Code/Subcode/Value``.

    Args:
        element: The element to start from.
        path: Local names separated by ``/``.

    Returns:
        The matching elements in document order (possibly empty).
    """
    current: list[etree._Element] = [element]
    for step in _split_path(path):
        current = [
            child
            for parent in current
            for child in parent.iterchildren()
            if local_name(child) == step
        ]
        if not current:
            break
    return current


def find_child(element: etree._Element, path: str) -> etree._Element | None:
    """Return the first element matching ``path``, or None."""
    matches: list[etree._Element] = find_children(element, path)
    return matches[0] if matches else None


def find_envelope_body(root: etree._Element) -> etree._Element | None:
    """Return the Body element directly under the envelope root, if any."""
    return find_child(root, 'Body')


def is_nil(element: etree._Element | None) -> bool:
    """
    Check if an XML element is missing or marked ``xsi:nil``.

    Args:
        element: The XML element to check. Can be None.

    Returns:
        True if the element is None or has xsi:nil set to '1' or 'true'.
    """
    if element is None:
        return True

    return element.get(XSI_NIL) in {'1', 'true'}


def _element_text(element: etree._Element) -> str | None:
    text: str | None = element.text
    if text is None or not text.strip():
        return None
    return text.strip()


def extract_text(element: etree._Element, path: str) -> str | None:
    """
    Extract stripped text content from the element found at ``path``.

    Performs no type conversion; that is left to pydantic.

    Returns:
        The stripped text, or None if the element is missing, nil, or blank.
    """
    child: etree._Element | None = find_child(element, path)

    if child is None or is_nil(child):
        return None

    return _element_text(child)


# --- Type Introspection Helpers ---


def _unwrap_optional(field_type: Any) -> Any:
    """
    Unwrap Optional[X] or X | None to get the actual type X.

    Example:
        >>> _unwrap_optional(str | None)
        str
    """
    origin: Any = get_origin(field_type)

    if origin is Union or origin is types.UnionType:
        non_none_types: list[Any] = [
            arg for arg in get_args(field_type) if arg is not type(None)
        ]
        if non_none_types:
            return non_none_types[0]

    return field_type


def _get_list_item_type(field_type: Any) -> Any | None:
    """Return X for list[X] (unwrapping Optional), or None for non-lists."""
    if get_origin(field_type) is not list:
        return None
    args: tuple[Any, ...] = get_args(field_type)
    if not args:
        return None
    return _unwrap_optional(args[0])


def _is_pydantic_model(field_type: Any) -> bool:
    return isinstance(field_type, type) and issubclass(field_type, BaseModel)


# --- Field Parsing Helpers ---


def _parse_primitive_list(element: etree._Element, path: str) -> list[str | None]:
    """Parse repeated primitive elements; nil or blank entries become None."""
    return [
        None if is_nil(item) else _element_text(item)
        for item in find_children(element, path)
    ]


def _parse_model_list(
    element: etree._Element,
    path: str,
    model_class: type[BaseModel],
) -> list[dict[str, Any]]:
    """Parse repeated elements into a list of model dictionaries."""
    nested_elements: list[etree._Element] = find_children(element, path)

    if nested_elements:
        logger.debug(
            'Parsing list field (path %r): found %d items', path, len(nested_elements)
        )

    return [
        parse_xml_to_dict(nested, model_class)
        for nested in nested_elements
        if not is_nil(nested)
    ]


# --- Main Parser ---


def parse_xml_to_dict(
    element: etree._Element,
    model_class: type[BaseModel],
) -> dict[str, Any]:
    """
    Parse an XML element into a dictionary shaped like a pydantic model.

    Each field is looked up by its alias (or field name) as a path of local
    names relative to ``element``. Missing, nil and blank elements are left
    out so that the model's defaults apply.

    Args:
        element: The XML element holding this model's data.
        model_class: The pydantic model class to inspect.

    Returns:
        A dictionary keyed by field alias, ready for model_validate().

    Example:
        >>> data = parse_xml_to_dict(body_element, GetSystemDateResponse)
        >>> reply = GetSystemDateResponse.model_validate(data)
    """
    data: dict[str, Any] = {}

    for field_name, field_info in model_class.model_fields.items():
        path: str = field_info.alias or field_name
        actual_type: Any = _unwrap_optional(field_info.annotation)
        item_type: Any | None = _get_list_item_type(actual_type)

        if get_origin(actual_type) is list:
            if item_type is not None and _is_pydantic_model(item_type):
                data[path] = _parse_model_list(element, path, item_type)
            else:
                data[path] = _parse_primitive_list(element, path)

        elif _is_pydantic_model(actual_type):
            nested: etree._Element | None = find_child(element, path)
            if not is_nil(nested):
                data[path] = parse_xml_to_dict(nested, actual_type)

        else:
            text: str | None = extract_text(element, path)
            if text is not None:
                data[path] = text

    return data
