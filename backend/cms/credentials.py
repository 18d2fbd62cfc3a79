# Username -> password hash mapping kept in a YAML file

import logging
import os
import threading

import yaml


class CredentialStore:
    """Reads and writes the credentials file.

    The file is a flat YAML mapping of username to password hash. A missing
    or empty file means no users. Entries are only ever added.
    """

    def __init__(self, path):
        self.path = path
        self._lock = threading.Lock()

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            users = yaml.safe_load(f) or {}
        if not isinstance(users, dict):
            raise ValueError(f'Credentials file {self.path} is not a mapping')
        return {str(name): str(stored) for name, stored in users.items()}

    def get(self, username):
        return self.load().get(username)

    def __contains__(self, username):
        return username in self.load()

    def add(self, username: str, password_hash: str) -> bool:
        """Persist a new entry. Returns False if ``username`` is already present."""
        with self._lock:
            users = self.load()
            if username in users:
                return False
            users[username] = password_hash
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = f'{self.path}.tmp'
            with open(tmp_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(users, f, default_flow_style=False)
            os.replace(tmp_path, self.path)
        logging.debug(f'Credential entry added for {username}')
        return True
