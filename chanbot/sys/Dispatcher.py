import logging
from chanbot.common.message import NoResponse
from chanbot.sys.invoker import Invoker, Failed, TimedOut


class Dispatcher(object):
    """ Picks at most one handler for a message and runs it.

    The command path is tried first: a message whose first word is the
    command prefix followed by a known command name goes to the first
    module (in registration order) declaring that command. If no command
    applies, the triggers of all modules are scanned in registration order
    and the first pattern that matches the text wins. Either way exactly
    one handler runs, or none.
    """

    def __init__(self, registryStore, configStore, commandPrefix='!',
                 invoker=None):
        self._registryStore = registryStore
        self._configStore = configStore
        self._commandPrefix = commandPrefix
        self._invoker = invoker or Invoker()
        self._log = logging.getLogger("dispatch")


    def commandPrefix(self, config=None):
        if config is None:
            config = self._configStore.current
        return config.get('command_prefix') or self._commandPrefix


    def dispatch(self, msg, protocol, bot=None):
        """ Return the Response for msg (NoResponse if nothing answers). """
        registry = self._registryStore.current
        config = self._configStore.current
        text = msg.payload
        if not text:
            return NoResponse
        if protocol is not None:
            protocol = protocol.lower()

        found = self._findCommand(registry, text, self.commandPrefix(config),
                                  protocol)
        if found is not None:
            module, command, args = found
            params = command.mapParams(args)
            def callCommand():
                instance = module.createInstance(bot, msg, config)
                return command.handler(instance, params, msg.user,
                                       msg.source, bot)
            return self._run(callCommand, command.timeout, command.identity)

        found = self._findTrigger(registry, text, protocol)
        if found is not None:
            module, trigger, match = found
            def callTrigger():
                instance = module.createInstance(bot, msg, config)
                return trigger.handler(instance, match, msg.user, msg.source)
            return self._run(callTrigger, trigger.timeout, trigger.identity)
        return NoResponse


    @staticmethod
    def splitCommand(text, prefix):
        """ Split '!name arg1 arg2' into ('name', ['arg1', 'arg2']). Returns
        None if text is not a command. """
        words = text.split()
        if not words or not prefix:
            return None
        lead = words[0]
        if not lead.startswith(prefix) or len(lead) <= len(prefix):
            return None
        return (lead[len(prefix):].lower(), words[1:])


    def _findCommand(self, registry, text, prefix, protocol):
        split = self.splitCommand(text, prefix)
        if split is None:
            return None
        name, args = split
        candidates = []
        for module in registry.loadedModules:
            if not module.allowsProtocol(protocol):
                continue
            command = module.findCommand(name)
            if command is not None and command.allowsProtocol(protocol):
                candidates.append((module, command))

        # exact fit first, then the first command whose required
        # parameters are given (surplus words are dropped)
        for module, command in candidates:
            if command.accepts(len(args)):
                return (module, command, args)
        for module, command in candidates:
            if len(args) >= command.required:
                return (module, command, args)
        return None


    def _findTrigger(self, registry, text, protocol):
        for module in registry.loadedModules:
            if not module.allowsProtocol(protocol):
                continue
            for trigger in module.triggers:
                m = trigger.match(text)
                if m is not None:
                    return (module, trigger, m)
        return None


    def _run(self, call, timeout, identity):
        self._log.debug("Running {}".format(identity))
        result = self._invoker.invoke(call, (), timeout, identity)
        if isinstance(result, Failed):
            self._log.error("Error in {}: {!r}\n{}"
                            .format(identity, result.reason,
                                    result.traceback or ""))
        elif isinstance(result, TimedOut):
            self._log.warning("{} timed out after {} seconds"
                              .format(identity, result.timeout))
        return result.toResponse()
