""" The module registry: what every loaded module answers to.

Modules are registered statically. At startup (and on reload) each module
class gets one ModuleDefinition, declares its commands and triggers on it,
and the finished definitions are frozen into Module records. The ordered
list of Modules forms an immutable Registry snapshot; dispatch only ever
reads a snapshot, and reloading builds a new one and swaps it in.
"""

import re
import logging
import threading
from collections import OrderedDict
from collections.abc import Mapping
from types import MappingProxyType
from chanbot.common.exceptions import FatalError, RegistrationError, \
                                      InvalidPatternError
from chanbot.modules.BaseModule import BaseModule
from chanbot.util.importClass import easyImportClass, reloadClass


DEFAULT_TIMEOUT = 5


def _protocolSet(protocols):
    if protocols is None:
        return None
    if isinstance(protocols, str):
        protocols = [protocols]
    tags = frozenset(str(p).lower() for p in protocols)
    if not tags:
        raise RegistrationError("Empty protocol restriction")
    return tags


def _checkTimeout(name, timeout):
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise RegistrationError("Timeout for {} must be a number, not {!r}"
                                .format(name, timeout))
    if timeout <= 0:
        raise RegistrationError("Timeout for {} must be positive, not {}"
                                .format(name, timeout))
    return timeout


class Trigger(object):
    """ A pattern and the handler called when a message text matches it.
    The handler is called as handler(module, match, user, source). """
    __slots__ = ('pattern', 'handler', 'timeout', 'moduleKey')

    def __init__(self, pattern, handler, timeout, moduleKey):
        self.pattern = pattern
        self.handler = handler
        self.timeout = timeout
        self.moduleKey = moduleKey

    @property
    def identity(self):
        return "{}/{}/".format(self.moduleKey, self.pattern.pattern)

    def match(self, text):
        if text is None:
            return None
        return self.pattern.search(text)

    def __repr__(self):
        return "<Trigger {}>".format(self.identity)


class Command(object):
    """ A named command with positional parameters. The handler is called
    as handler(module, params, user, source, bot), where params maps each
    parameter name to its argument (None if not given).

    required is the number of leading parameters that must be given. rest,
    if set, is the name under which surplus arguments are passed as a list.
    """
    __slots__ = ('name', 'moduleKey', 'params', 'required', 'rest',
                 'protocols', 'handler', 'timeout')

    def __init__(self, name, moduleKey, params, required, rest, protocols,
                 handler, timeout):
        self.name = name
        self.moduleKey = moduleKey
        self.params = params
        self.required = required
        self.rest = rest
        self.protocols = protocols
        self.handler = handler
        self.timeout = timeout

    @property
    def identity(self):
        return "{}.{}".format(self.moduleKey, self.name)

    @property
    def hasRest(self):
        return self.rest is not None

    def accepts(self, argCount):
        """ True if the command can be called with argCount arguments. """
        if argCount < self.required:
            return False
        return self.hasRest or argCount <= len(self.params)

    def allowsProtocol(self, protocol):
        return self.protocols is None or protocol in self.protocols

    def mapParams(self, args):
        """ Map positional arguments onto the parameter names. Missing
        arguments map to None. Surplus arguments go to the rest parameter
        if there is one and are dropped otherwise. """
        params = OrderedDict()
        for index, name in enumerate(self.params):
            params[name] = args[index] if index < len(args) else None
        if self.hasRest:
            params[self.rest] = list(args[len(self.params):])
        return params

    def __repr__(self):
        return "<Command {}({})>".format(self.identity, ', '.join(self.params))


class Module(object):
    """ A frozen module definition. """

    def __init__(self, key, moduleClass, descriptions, triggers, commands,
                 timeouts, protocols, defaults):
        self.key = key
        self.moduleClass = moduleClass
        self.descriptions = MappingProxyType(dict(descriptions))
        self.triggers = tuple(triggers)
        self.commands = tuple(commands)
        self.timeouts = MappingProxyType(dict(timeouts))
        self.protocols = protocols
        self.defaults = MappingProxyType(dict(defaults))

    @property
    def description(self):
        return self.descriptions.get(None)

    def allowsProtocol(self, protocol):
        return self.protocols is None or protocol in self.protocols

    def findCommand(self, name):
        name = name.lower()
        for command in self.commands:
            if command.name == name:
                return command
        return None

    def createInstance(self, bot, msg, config):
        return self.moduleClass(bot, msg, config)

    def __repr__(self):
        return "<Module {}>".format(self.key)


class ModuleDefinition(object):
    """ Builder handed to a module class at load time. Declarations are
    validated as they are made; build() freezes them into a Module. """

    def __init__(self, key, moduleClass=BaseModule):
        if not key or not isinstance(key, str):
            raise RegistrationError("Invalid module key {!r}".format(key))
        self.key = key
        self.moduleClass = moduleClass
        self._descriptions = {}
        self._triggers = []
        self._commands = OrderedDict()
        self._timeouts = {}
        self._protocols = None
        self._defaults = OrderedDict()
        self._built = False


    def _checkOpen(self):
        if self._built:
            raise RegistrationError("Module {} is already registered"
                                    .format(self.key))


    def registerTrigger(self, pattern, handler, timeout=None):
        """ Call handler when a message text matches pattern (a regular
        expression string or compiled pattern). """
        self._checkOpen()
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise InvalidPatternError(
                        "Invalid trigger pattern {!r} in module {}: {}"
                        .format(pattern, self.key, e))
        elif not isinstance(pattern, re.Pattern):
            raise InvalidPatternError("Trigger in module {} is not a pattern:"
                                      " {!r}".format(self.key, pattern))
        if not callable(handler):
            raise RegistrationError("Trigger {!r} in module {} has no "
                                    "callable handler"
                                    .format(pattern.pattern, self.key))
        if timeout is not None:
            _checkTimeout(pattern.pattern, timeout)
            self._timeouts[pattern.pattern] = timeout
        self._triggers.append((pattern, handler))
        return handler


    def registerCommand(self, name, params=(), handler=None, protocols=None,
                        timeout=None, required=0, rest=None):
        """ Declare the command !name. params is the ordered list of
        parameter names. """
        self._checkOpen()
        if not name or not isinstance(name, str) or name.split() != [name]:
            raise RegistrationError("Invalid command name {!r} in module {}"
                                    .format(name, self.key))
        name = name.lower()
        if name in self._commands:
            raise RegistrationError("Duplicate command {} in module {}"
                                    .format(name, self.key))
        if isinstance(params, str):
            params = [params]
        params = tuple(params)
        if any(not p or not isinstance(p, str) for p in params):
            raise RegistrationError("Invalid parameter names {!r} for command"
                                    " {}".format(params, name))
        if len(set(params)) != len(params):
            raise RegistrationError("Duplicate parameter names {!r} for "
                                    "command {}".format(params, name))
        if rest is not None and (not isinstance(rest, str) or rest in params):
            raise RegistrationError("Invalid rest parameter {!r} for command "
                                    "{}".format(rest, name))
        if (isinstance(required, bool) or not isinstance(required, int)
                or not 0 <= required <= len(params)):
            raise RegistrationError("Command {} requires {!r} of {} "
                                    "parameters".format(name, required,
                                                        len(params)))
        if not callable(handler):
            raise RegistrationError("Command {} in module {} has no callable "
                                    "handler".format(name, self.key))
        if timeout is not None:
            _checkTimeout(name, timeout)
        self._commands[name] = {'params': params,
                                'required': required,
                                'rest': rest,
                                'protocols': _protocolSet(protocols),
                                'handler': handler,
                                'timeout': timeout}
        return handler


    def describe(self, nameOrText, text=None):
        """ describe(text) sets the module description, describe(name, text)
        the help text of a command. A dict of name -> text is accepted
        too. """
        self._checkOpen()
        if isinstance(nameOrText, Mapping):
            for name, desc in nameOrText.items():
                self.describe(name, desc)
        elif text is None:
            self._descriptions[None] = str(nameOrText)
        else:
            self._descriptions[str(nameOrText).lower()] = str(text)


    def setTimeout(self, name, timeout):
        """ Set the timeout (seconds) of a command, or of a trigger given by
        its pattern string. May be called before the command exists. """
        self._checkOpen()
        if isinstance(name, re.Pattern):
            name = name.pattern
        elif name in self._commands or not isinstance(name, str):
            pass
        elif not any(p.pattern == name for p, _h in self._triggers):
            name = name.lower()
        self._timeouts[name] = _checkTimeout(name, timeout)


    def restrictProtocols(self, *protocols):
        """ Limit the whole module to the given protocol tags. """
        self._checkOpen()
        self._protocols = _protocolSet(protocols)


    def setDefaultConfig(self, mapping):
        """ Declare configuration keys this module reads and their default
        values. """
        self._checkOpen()
        if not isinstance(mapping, Mapping):
            raise TypeError("not a mapping: {!r}".format(mapping))
        for key, value in mapping.items():
            if not isinstance(key, str) or not key:
                raise RegistrationError("Invalid configuration key {!r} in "
                                        "module {}".format(key, self.key))
            self._defaults[key] = value


    def build(self):
        self._checkOpen()
        triggerPatterns = set(p.pattern for p, _h in self._triggers)
        for name in self._timeouts:
            if name not in self._commands and name not in triggerPatterns:
                raise RegistrationError("Timeout set for unknown command or "
                                        "trigger {!r} in module {}"
                                        .format(name, self.key))
        triggers = [Trigger(pattern, handler,
                            self._timeouts.get(pattern.pattern,
                                               DEFAULT_TIMEOUT),
                            self.key)
                    for pattern, handler in self._triggers]
        commands = []
        for name, spec in self._commands.items():
            timeout = spec['timeout']
            if timeout is None:
                timeout = self._timeouts.get(name, DEFAULT_TIMEOUT)
            self._timeouts[name] = timeout
            commands.append(Command(name, self.key, spec['params'],
                                    spec['required'], spec['rest'],
                                    spec['protocols'], spec['handler'],
                                    timeout))
        self._built = True
        return Module(self.key, self.moduleClass, self._descriptions,
                      triggers, commands, self._timeouts, self._protocols,
                      self._defaults)


class Registry(object):
    """ An immutable, ordered snapshot of loaded modules. Registration order
    decides which module wins when several could answer a message. """

    def __init__(self, modules=()):
        self._log = logging.getLogger("registry")
        seen = set()
        defaults = OrderedDict()
        for module in modules:
            if module.key in seen:
                raise RegistrationError("Duplicate module {}"
                                        .format(module.key))
            seen.add(module.key)
            for k, v in module.defaults.items():
                if k in defaults:
                    self._log.debug("Configuration key {} of module {} is "
                                    "already declared".format(k, module.key))
                    continue
                defaults[k] = v
        self.loadedModules = tuple(modules)
        self.defaults = MappingProxyType(defaults)

    def __iter__(self):
        return iter(self.loadedModules)

    def __len__(self):
        return len(self.loadedModules)

    def findModule(self, key):
        for module in self.loadedModules:
            if module.key.lower() == str(key).lower():
                return module
        return None

    def commandNames(self):
        """ All command names in registration order, without repeats. """
        names = []
        for module in self.loadedModules:
            for command in module.commands:
                if command.name not in names:
                    names.append(command.name)
        return names

    def commandsNamed(self, name):
        """ All commands called name, in registration order. """
        name = name.lower()
        return [command for module in self.loadedModules
                for command in module.commands if command.name == name]


def defineModule(ModuleClass):
    """ Run the static definition of one module class. """
    d = ModuleDefinition(ModuleClass.moduleKey(), ModuleClass)
    ModuleClass._define(d)
    return d.build()


def registryFromClasses(moduleClasses):
    log = logging.getLogger("registry")
    modules = []
    for ModuleClass in moduleClasses:
        module = defineModule(ModuleClass)
        log.info("Registered module {} ({} commands, {} triggers)."
                 .format(module.key, len(module.commands),
                         len(module.triggers)))
        modules.append(module)
    return Registry(modules)


def importModuleClasses(moduleNames, base):
    """ Import module classes by dotted name relative to base. """
    classes = []
    for name in moduleNames:
        try:
            classes.append(easyImportClass(base, name))
        except ImportError:
            raise FatalError("Error importing module/class {0} "
                             "from base {1}. Either the module does "
                             "not exist, or there was an error. To "
                             "check for errors, use the command line "
                             "'python -m {1}.{0}'; the actual path "
                             "may vary."
                             .format(name, base))
    return classes


def buildRegistry(moduleNames, base):
    return registryFromClasses(importModuleClasses(moduleNames, base))


class RegistryStore(object):
    """ Holds the process-wide Registry. Readers take the current snapshot;
    load() and reloadModules() build a complete new Registry before swapping
    it in, so a dispatch never sees a partially rebuilt registry. """

    def __init__(self, moduleNames=(), base=""):
        self._lock = threading.Lock()
        self._moduleNames = list(moduleNames)
        self._base = base
        self._current = Registry()
        self._log = logging.getLogger("registry")

    @property
    def current(self):
        return self._current

    @property
    def loadedModules(self):
        return self._current.loadedModules

    def install(self, registry):
        with self._lock:
            self._current = registry
        return registry

    def load(self):
        with self._lock:
            self._log.info("---- Loading modules... ----")
            registry = buildRegistry(self._moduleNames, self._base)
            self._current = registry
            self._log.info("---- All modules loaded. ----")
            return registry

    def reloadModules(self):
        """ Re-read module sources and rebuild the registry. If anything
        fails, the old registry stays installed and the error propagates. """
        with self._lock:
            self._log.info("---- Reloading modules... ----")
            reloaded = {}
            classes = []
            for ModuleClass in importModuleClasses(self._moduleNames,
                                                   self._base):
                fileName = ModuleClass.__module__
                if fileName not in reloaded:
                    reloaded[fileName] = True
                    ModuleClass = reloadClass(ModuleClass)
                else:
                    ModuleClass = easyImportClass(fileName,
                                                  ModuleClass.__name__)
                classes.append(ModuleClass)
            registry = registryFromClasses(classes)
            self._current = registry
            self._log.info("---- Reloaded {} modules. ----"
                           .format(len(registry)))
            return registry
