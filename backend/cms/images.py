# Flat, unversioned image storage

from io import BytesIO
import logging
import os

from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from .errors import NotFound, UnsupportedExtension
from .render import extension_of

# Pillow cannot decode SVG, so only these are checked for content
RASTER_EXTENSIONS = {'jpg', 'jpeg', 'png'}


class ImageStore:
    def __init__(self, root, extensions=('jpg', 'png', 'svg')):
        self.root = root
        self.extensions = {ext.lower().lstrip('.') for ext in extensions}

    def allowed_file(self, filename) -> bool:
        return '.' in filename and extension_of(filename) in self.extensions

    def _safe_name(self, filename):
        name = secure_filename(filename or '')
        if not name:
            raise NotFound(f'{filename} does not exist.')
        return name

    def upload(self, filename, data: bytes) -> str:
        """Store ``data`` under ``filename``, replacing any image of that name."""
        name = secure_filename(filename or '')
        if not name or not self.allowed_file(name):
            allowed = ', '.join(f'.{ext}' for ext in sorted(self.extensions))
            raise UnsupportedExtension(f'Images must be one of: {allowed}.')
        if extension_of(name) in RASTER_EXTENSIONS:
            try:
                with Image.open(BytesIO(data)) as img:
                    img.verify()
            except (UnidentifiedImageError, OSError, SyntaxError) as e:
                logging.debug(f'Rejected upload {name}: {e}')
                raise UnsupportedExtension(f'{name} is not a valid image.') from e
        os.makedirs(self.root, exist_ok=True)
        with open(os.path.join(self.root, name), 'wb') as f:
            f.write(data)
        logging.debug(f'Image stored: {name}, length={len(data)}')
        return name

    def path_for(self, filename) -> str:
        name = self._safe_name(filename)
        path = os.path.join(self.root, name)
        if name != filename or not self.allowed_file(name) or not os.path.isfile(path):
            raise NotFound(f'{filename} does not exist.')
        return path

    def delete(self, filename):
        os.remove(self.path_for(filename))
        logging.debug(f'Image deleted: {filename}')

    def list_images(self) -> list:
        if not os.path.isdir(self.root):
            return []
        return sorted(
            entry for entry in os.listdir(self.root)
            if self.allowed_file(entry) and os.path.isfile(os.path.join(self.root, entry))
        )
