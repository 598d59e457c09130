# soapreply/payload.py
"""
Base model for the payloads decoded from successful SOAP replies.

Callers describe the reply they expect as a pydantic model. Field aliases name
the XML elements to read, relative to the envelope Body, and may be paths::

    class GetSystemDateAndTimeResponse(XmlPayload):
        year: int = Field(alias='GetSystemDateAndTimeResponse/SystemDateAndTime/UTCDateTime/Date/Year')
        time_zone: str | None = Field(None, alias='GetSystemDateAndTimeResponse/SystemDateAndTime/TimeZone/TZ')
"""

import logging
from typing import Any, Self

from lxml import etree
from pydantic import BaseModel, ConfigDict

from .utils.xml_tools import parse_xml_to_dict

logger: logging.Logger = logging.getLogger(__name__)


class XmlPayload(BaseModel):
    """
    A pydantic model that can be populated from an lxml element.

    Subclasses only declare fields; nested XmlPayload fields and lists of
    them are parsed recursively.
    """

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_xml_element(cls, element: etree._Element) -> Self:
        """
        Parse an XML element into an instance of this model.

        Args:
            element: The element holding the payload, usually the SOAP Body.

        Returns:
            A validated model instance.

        Raises:
            pydantic.ValidationError: If the extracted data does not fit the model.
        """
        data: dict[str, Any] = parse_xml_to_dict(element, cls)
        logger.debug('Extracted %d fields for %s', len(data), cls.__name__)
        return cls.model_validate(data)
