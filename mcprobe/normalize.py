"""Pure normalization of the free-form fields in a Java status payload.

Servers send the description ("MOTD") either as a bare string or as a chat
component, and the version either as a string or as an object whose name
is decorated by the server software. These helpers reduce both to plain
strings without touching the network.
"""
import json
import re
from dataclasses import dataclass
from typing import Tuple, Union

FORMATTING_CODE = re.compile(r'§[0-9a-fklmnor]', re.IGNORECASE)
VERSION_NUMBER = re.compile(r'(\d+\.\d+\.\d+|\d+\.\d+)')


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class TextComponent:
    text: str


@dataclass(frozen=True)
class ComponentParts:
    parts: Tuple[str, ...]


Description = Union[PlainText, TextComponent, ComponentParts]


def _part_text(part) -> str:
    if isinstance(part, str):
        return part
    if isinstance(part, dict):
        text = part.get('text')
        return str(text) if text else ''
    return ''


def parse_description(raw) -> Description:
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, dict):
        text = raw.get('text')
        if text:
            return TextComponent(str(text))
        extra = raw.get('extra')
        if isinstance(extra, list):
            return ComponentParts(tuple(_part_text(part) for part in extra))
    return PlainText('')


def flatten_description(description: Description) -> str:
    if isinstance(description, ComponentParts):
        return ''.join(description.parts)
    return description.text


def strip_formatting(text: str) -> str:
    # removing one code can splice a new one together ("§§aa"), so repeat until stable
    while True:
        stripped = FORMATTING_CODE.sub('', text)
        if stripped == text:
            return stripped
        text = stripped


def normalize_description(raw) -> str:
    return strip_formatting(flatten_description(parse_description(raw)))


def normalize_version(raw) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict):
        name = raw.get('name')
        if isinstance(name, str) and name:
            match = VERSION_NUMBER.search(name)
            return match.group(0) if match else name
        return json.dumps(raw, separators=(',', ':'))
    return ''
