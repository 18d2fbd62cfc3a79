# Versioned documents stored as directories of immutable blobs

from contextlib import contextmanager
import logging
import os
import re
import shutil
import threading
import uuid
import weakref

from .errors import InvalidName, NotFound
from .render import extension_of, kind_for

INDEX_FILENAME = 'index.log'
MAX_NAME_BYTES = 255
_TOKEN_RE = re.compile(r'^[0-9a-f]{32}$')


def new_version_id() -> str:
    return uuid.uuid4().hex


class DocumentStore:
    """Every document is a directory under ``root`` named after the document.

    The directory holds one file per version, named by an opaque token, and
    ``index.log`` listing the tokens in the order they were written. The last
    line of the index is the current content. Versions are never rewritten;
    an edit appends a new one.

    Writes to one document are serialized with a per-document lock.
    """

    def __init__(self, root, extensions=('txt', 'md')):
        self.root = root
        self.extensions = {ext.lower().lstrip('.') for ext in extensions}
        self._locks = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _dir(self, name):
        return os.path.join(self.root, name)

    def _index_path(self, name):
        return os.path.join(self.root, name, INDEX_FILENAME)

    @contextmanager
    def _locked(self, name):
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
        with lock:
            yield

    def _check_new_name(self, name):
        if name is None or not name.strip():
            raise InvalidName('A name is required.')
        name = name.strip()
        if (os.path.basename(name) != name or '\\' in name or '\x00' in name
                or name.startswith('.') or len(name.encode('utf-8')) > MAX_NAME_BYTES):
            raise InvalidName(f'{name} is not a valid document name.')
        if extension_of(name) not in self.extensions:
            allowed = ' or '.join(f'.{ext}' for ext in sorted(self.extensions))
            raise InvalidName(f'Document names must end with {allowed}.')
        if os.path.lexists(self._dir(name)):
            raise InvalidName(f'{name} already exists.')
        return name

    def exists(self, name) -> bool:
        if not name or os.path.basename(name) != name or name.startswith('.'):
            return False
        return os.path.isfile(self._index_path(name))

    def _require(self, name):
        if not self.exists(name):
            raise NotFound(f'{name} does not exist.')

    def _append(self, name, content: bytes) -> str:
        version_id = new_version_id()
        with open(os.path.join(self._dir(name), version_id), 'wb') as f:
            f.write(content)
        with open(self._index_path(name), 'a', encoding='utf-8') as f:
            f.write(version_id + '\n')
        return version_id

    def create(self, name) -> str:
        """Create an empty document and return its (stripped) name."""
        name = self._check_new_name(name)
        with self._locked(name):
            if os.path.lexists(self._dir(name)):
                raise InvalidName(f'{name} already exists.')
            os.makedirs(self._dir(name))
            version_id = self._append(name, b'')
        logging.debug(f'Document created: {name}, first version {version_id}')
        return name

    def append_version(self, name, content) -> str:
        """Write ``content`` as a new version of ``name`` and return its id."""
        if isinstance(content, str):
            content = content.encode('utf-8')
        with self._locked(name):
            self._require(name)
            version_id = self._append(name, content)
        logging.debug(f'Version {version_id} appended to {name}: length={len(content)}')
        return version_id

    def versions(self, name) -> list:
        """Version ids of ``name``, oldest first."""
        self._require(name)
        with open(self._index_path(name), 'r', encoding='utf-8') as f:
            return [line.strip() for line in f if line.strip()]

    def latest_version(self, name) -> str:
        versions = self.versions(name)
        if not versions:
            raise NotFound(f'{name} has no versions.')
        return versions[-1]

    def read_version(self, name, version_id):
        """Return ``(content, kind)`` for one version.

        The kind is taken from the document name; version files carry no
        extension.
        """
        self._require(name)
        path = os.path.join(self._dir(name), version_id or '')
        if not version_id or not _TOKEN_RE.match(version_id) or not os.path.isfile(path):
            raise NotFound(f'Version {version_id} of {name} does not exist.')
        with open(path, 'rb') as f:
            content = f.read()
        return content, kind_for(name)

    def read_latest(self, name):
        return self.read_version(name, self.latest_version(name))

    def duplicate(self, source, dest) -> str:
        """Create ``dest`` holding the current content of ``source``."""
        self._require(source)
        content, _ = self.read_latest(source)
        dest = self.create(dest)
        with self._locked(dest):
            first = self.latest_version(dest)
            with open(os.path.join(self._dir(dest), first), 'wb') as f:
                f.write(content)
        logging.debug(f'Document {source} duplicated to {dest}')
        return dest

    def delete(self, name):
        """Remove a document with all of its versions."""
        with self._locked(name):
            self._require(name)
            tombstone = os.path.join(self.root, f'.{name}.deleted-{uuid.uuid4().hex}')
            os.rename(self._dir(name), tombstone)
            shutil.rmtree(tombstone)
        logging.debug(f'Document deleted: {name}')

    def list_documents(self) -> list:
        if not os.path.isdir(self.root):
            return []
        return sorted(entry for entry in os.listdir(self.root) if self.exists(entry))
