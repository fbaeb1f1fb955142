import logging
import threading
from collections.abc import Mapping


class Configuration(Mapping):
    """ A read-only snapshot of the shared configuration. Handlers read it
    like a dict or through attributes (config.title). Changes never touch a
    snapshot; withValue() returns a new one. """

    def __init__(self, values=None):
        self.__dict__['_values'] = dict(values or {})

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name):
        try:
            return self.__dict__['_values'][name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        raise AttributeError("Configuration snapshots are read-only")

    def __repr__(self):
        return "Configuration({!r})".format(self._values)

    def withValue(self, key, value):
        return self.withValues({key: value})

    def withValues(self, mapping):
        values = dict(self._values)
        values.update(mapping)
        return Configuration(values)


class ConfigurationStore(object):
    """ Holds the current Configuration. Every change builds a complete new
    snapshot and swaps the reference, so a reader holding the old snapshot
    never sees a half-applied update. """

    def __init__(self, values=None):
        self._lock = threading.Lock()
        self._current = Configuration(values)
        self._log = logging.getLogger("config")

    @property
    def current(self):
        return self._current

    def set(self, key, value):
        return self.update({key: value})

    def update(self, mapping):
        with self._lock:
            self._current = self._current.withValues(mapping)
            self._log.info("Configuration changed: {}"
                           .format(', '.join("{} = {!r}".format(k, v)
                                             for k, v in mapping.items())))
            return self._current

    def mergeDefaults(self, defaults):
        """ Add keys from defaults that are not configured yet. Existing
        values win. """
        with self._lock:
            missing = dict((k, v) for k, v in defaults.items()
                           if k not in self._current)
            if missing:
                self._current = self._current.withValues(missing)
                self._log.debug("Added defaults: {}"
                                .format(', '.join(sorted(missing))))
            return self._current
