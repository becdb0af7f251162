import configparser
import importlib
import os
from typing import Dict

from .backends.base import BaseBackend


class Config(object):
    """
    Config accessing class.

    Each [backend.<name>] section names a backend class with a dotted
    "class" key; the remaining keys are passed to it as keyword arguments.
    """

    def __init__(self, paths=None):
        self.paths = paths or [
            "backuparchive-config",
            os.path.expanduser("~/.backuparchive/config"),
            "/etc/backuparchive/config",
        ]
        self.load()

    def load(self):
        """
        Loads the first configuration file that exists
        """
        for path in self.paths:
            if os.path.isfile(path):
                self.config = configparser.ConfigParser()
                self.config.read(path)
                self.path = path
                self.backends: Dict[str, BaseBackend] = {
                    section.split(".", 1)[1]: self.load_backend(section)
                    for section in self.config.sections()
                    if section.startswith("backend.")
                }
                return
        raise ValueError("No config file found! Paths: %s" % ", ".join(self.paths))

    def load_backend(self, section: str) -> BaseBackend:
        """
        Instantiates the backend described by a config section
        """
        kwargs = dict(self.config[section])
        class_path = kwargs.pop("class", "")
        if "." not in class_path:
            raise ValueError("[%s] needs a dotted class name" % section)
        module_name, class_name = class_path.rsplit(".", 1)
        return getattr(importlib.import_module(module_name), class_name)(**kwargs)

    def __getitem__(self, key):
        return self.config[key]
