import logging


class BaseModule(object):
    """The parent class of every Module.

    A module class plays two roles:

    1. At load time, the registry calls the _define() classmethod exactly
       once with a ModuleDefinition. The class declares its commands,
       triggers, help texts, timeouts and configuration defaults there.
    2. When a message matches one of those commands or triggers, the
       dispatcher creates a fresh instance for that single message and
       calls the handler on it. Nothing is kept between messages; use the
       shared configuration for anything that must persist.

    The _name attribute is the module key (shown by !list and !help). If it
    is empty, the class name without a trailing "Module" is used.
    """
    _name = ""


    def __init__(self, bot, msg, config):
        self._bot = bot
        self._msg = msg
        self._config = config
        self._log = logging.getLogger("modules.{}".format(self.moduleKey()))


    @classmethod
    def moduleKey(cls):
        if cls._name:
            return cls._name
        name = cls.__name__
        if name.endswith("Module") and len(name) > len("Module"):
            name = name[:-len("Module")]
        return name


    @classmethod
    def _define(cls, d):
        """ Declare commands and triggers on the ModuleDefinition d. """
        pass


    # property getters

    @property
    def key(self):
        return self.moduleKey()

    @property
    def bot(self):
        """ The connection-side bot object the message arrived on. """
        return self._bot

    @property
    def msg(self):
        """ The Message being handled. """
        return self._msg

    @property
    def config(self):
        """ Configuration snapshot taken when dispatch started. """
        return self._config

    @property
    def protocol(self):
        return getattr(self._bot, 'protocol', None)


    # logging

    def log(self, txt):
        """Write something to the log with level INFO"""
        self._log.info(txt)


    def debugLog(self, txt):
        """Write something to the log with level DEBUG"""
        self._log.debug(txt)


    def errorLog(self, txt):
        """Write something to the log with level ERROR"""
        self._log.error(txt)
