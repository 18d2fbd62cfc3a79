# Turning stored content into something a browser can display

from enum import Enum
import logging
import os

import markdown


class ContentKind(Enum):
    MARKDOWN = 'markdown'
    TEXT = 'text'
    IMAGE = 'image'


_KINDS = {
    'md': ContentKind.MARKDOWN,
    'txt': ContentKind.TEXT,
    'jpg': ContentKind.IMAGE,
    'jpeg': ContentKind.IMAGE,
    'png': ContentKind.IMAGE,
    'svg': ContentKind.IMAGE,
}


def extension_of(name: str) -> str:
    """Lower-cased extension without the dot, '' if there is none."""
    return os.path.splitext(name)[1].lower().lstrip('.')


def kind_for(name: str) -> ContentKind:
    """Resolve the content kind from a registered document or image name."""
    try:
        return _KINDS[extension_of(name)]
    except KeyError:
        raise ValueError(f'No content kind for {name}') from None


def render(raw: bytes, kind: ContentKind):
    """Return ``(body, mimetype)`` for a document body of the given kind."""
    text = raw.decode('utf-8', errors='replace')
    if kind is ContentKind.MARKDOWN:
        logging.debug(f'Rendering markdown: length={len(text)}')
        return markdown.markdown(text), 'text/html'
    if kind is ContentKind.TEXT:
        return text, 'text/plain'
    raise ValueError(f'Cannot render {kind.value} content as a document')


_IMAGE_MIMETYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'svg': 'image/svg+xml',
}


def image_mimetype(name: str) -> str:
    """Mimetype for serving a stored image, resolved through its content kind."""
    if kind_for(name) is not ContentKind.IMAGE:
        raise ValueError(f'{name} is not an image')
    return _IMAGE_MIMETYPES[extension_of(name)]
