import logging
import threading
from chanbot.common.exceptions import MalformedMessageError
from chanbot.protocol import getParser
from chanbot.sys.ResponseEmitter import ResponseEmitter
from chanbot.util.ExceptionThread import ExceptionThread


# verbs that carry chat text and are offered to the modules
CHAT_VERBS = ('PRIVMSG', 'GROUPCHAT')


class CommunicationDirector(ExceptionThread):
    """ The CommunicationDirector owns one chat connection. It is the top
    tier of the bot: it reads lines from its transport one at a time,
    parses them, lets the transport handle server housekeeping, and passes
    chat messages to the Dispatcher. Whatever the Dispatcher returns is
    turned into outbound lines by the ResponseEmitter and sent back over the
    same transport.

    Lines are processed strictly in order, so at most one handler runs per
    connection at any time. Several directors (one per network) run side by
    side and share only the registry and configuration stores.

    The director is also the "bot" object handed to command handlers. It
    exposes the connection's protocol, nick and the shared stores.
    """

    def __init__(self, name, transport, dispatcher, registryStore,
                 configStore, emitter=None):
        self._connectionName = name
        self._transport = transport
        self._dispatcher = dispatcher
        self.registryStore = registryStore
        self.configStore = configStore
        self._parser = getParser(transport.protocol)
        self._emitter = emitter or ResponseEmitter(
                                    getattr(transport, 'supportsMultiline',
                                            False))
        self._stopEvent = threading.Event()
        self._log = logging.getLogger(name)
        super(CommunicationDirector, self).__init__(name="Director-{}"
                                                         .format(name))
        self.daemon = True


    @property
    def connectionName(self):
        return self._connectionName

    @property
    def protocol(self):
        return self._parser.protocol

    @property
    def nick(self):
        return getattr(self._transport, 'nick', None)

    @property
    def commandPrefix(self):
        return self._dispatcher.commandPrefix()


    def say(self, target, text):
        self._transport.say(target, text)


    def stop(self):
        self._stopEvent.set()


    @property
    def stopped(self):
        return self._stopEvent.is_set()


    def _run(self):
        self._log.info("******** Connecting {} ********"
                       .format(self._connectionName))
        self._transport.connect()
        try:
            while not self._stopEvent.is_set():
                raw = self._transport.receive()
                if raw is None:
                    continue
                self.processRaw(raw)
        finally:
            self._transport.close()
            self._log.info("******** {} offline ********"
                           .format(self._connectionName))


    def processRaw(self, raw):
        """ Handle one raw line (or room event). Returns the list of
        (target, text) pairs that were sent. """
        try:
            msg = self._parser.parse(raw)
        except MalformedMessageError as e:
            self._log.warning(str(e))
            return []
        return self.processMessage(msg)


    def processMessage(self, msg):
        handleControl = getattr(self._transport, 'handleControl', None)
        if handleControl is not None and handleControl(msg):
            return []
        if msg.verb not in CHAT_VERBS:
            return []
        if msg.user is not None and msg.user == self.nick:
            self._log.debug("rejected: message from myself: {}"
                            .format(msg.payload))
            return []
        self._log.debug("<{}> {}: {}".format(msg.user, msg.source,
                                             msg.payload))
        response = self._dispatcher.dispatch(msg, self.protocol, self)
        sent = self._emitter.emit(response, msg)
        for target, line in sent:
            self._log.debug("-> {}: {}".format(target, line))
            self._transport.say(target, line)
        return sent
