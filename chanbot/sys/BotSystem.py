import io
import os
import time
import logging
import threading
from configobj import ConfigObj, ParseError, flatten_errors
from configobj.validate import Validator
from chanbot.common.configSpec import CONFIG_SPEC
from chanbot.common.exceptions import FatalError
from chanbot.sys.configuration import ConfigurationStore
from chanbot.sys.registry import RegistryStore
from chanbot.sys.Dispatcher import Dispatcher
from chanbot.sys.CommunicationDirector import CommunicationDirector
from chanbot.transport.IrcTransport import IrcTransport
from chanbot.util.settingsFile import readSettings
from chanbot import logConfig


# a connection that dies sooner than this after connecting counts as a
# crash and is retried with exponential back-off
FAST_CRASH_TIME = 300
MAX_CRASH_WAIT = 2 * 60 * 60


def loadConfig(configFile):
    """ Load and validate the bot configuration. Returns (ConfigObj,
    original text). Raises FatalError if the file is invalid. """
    log = logging.getLogger()
    log.debug("Loading config file...")
    try:
        c = ConfigObj(configFile, configspec=io.StringIO(CONFIG_SPEC),
                      interpolation=False, raise_errors=True,
                      create_empty=True, encoding='utf-8')
        passed = c.validate(Validator(), copy=True, preserve_errors=True)
    except ParseError as e:
        raise FatalError("Parse error in {}:{}: \"{}\""
                         .format(configFile, e.line_number, e.line))
    if passed is not True:
        f = flatten_errors(c, passed)
        error1 = f[0]
        raise FatalError("Invalid configuration. First error "
                         "found in section [{}], key \"{}\". Error: {}"
                         .format('/'.join(error1[0]),
                                 error1[1], error1[2]))
    for name, conn in c['connections'].items():
        if not conn.get('host'):
            raise FatalError("Connection [{}] has no host.".format(name))
    txt = ""
    if os.path.exists(configFile):
        with io.open(configFile, encoding='utf-8') as f:
            txt = f.read()
    log.debug("{} loaded.".format(configFile))
    return (c, txt)


def saveConfig(config, configFile, oldTxt):
    """ Write the validated config (with inserted defaults) back to disk if
    it changed. With overwrite_config off, write to <file>.new instead. """
    log = logging.getLogger()
    out = io.BytesIO()
    config.write(out)
    txt = out.getvalue().decode('utf-8')
    if txt == oldTxt:
        return
    filename = configFile + ("" if config['overwrite_config'] else ".new")
    log.debug("Config changed; writing to {}".format(filename))
    with io.open(filename, 'w', encoding='utf-8') as f:
        f.write(txt)


class ConnectionEntry(object):
    """ Book-keeping for one configured connection. """
    def __init__(self, name, config, reconnectWait):
        self.name = name
        self.config = config
        self.director = None
        self.startTime = 0
        self.baseWait = reconnectWait
        self.crashWait = reconnectWait
        self.nextStart = 0


class BotSystem(object):
    """ This is the "Main" class for the bot. It loads the configuration,
    the settings file and the modules, then starts one CommunicationDirector
    per configured connection. The method loop() is the main loop of the
    program; it restarts dead connections and reloads modules on request.
    """
    def __init__(self, props, exitEvent, reloadEvent=None):
        self._props = props
        self._exitEvent = exitEvent
        self._reloadEvent = reloadEvent or threading.Event()
        self._log = logging.getLogger()
        self._connections = []

        self._config, oldTxt = loadConfig(props.configFile)
        saveConfig(self._config, props.configFile, oldTxt)
        botConfig = self._config['bot']
        self._settingsFile = botConfig['settings_file']

        self.registryStore = RegistryStore(botConfig['modules'],
                                           botConfig['base'])
        registry = self.registryStore.load()
        settings = readSettings(self._settingsFile, registry.defaults)
        self.configStore = ConfigurationStore(settings)
        self.configStore.mergeDefaults(registry.defaults)
        self.configStore.set('command_prefix', botConfig['command_prefix'])
        self.dispatcher = Dispatcher(self.registryStore, self.configStore,
                                     botConfig['command_prefix'])

        for name, conn in self._config['connections'].items():
            self._connections.append(
                    ConnectionEntry(name, conn, conn['reconnect_wait']))
        if not self._connections:
            raise FatalError("No connections configured in {}."
                             .format(props.configFile))


    def createTransport(self, name, conn):
        nick = conn['nick'] or self._config['bot']['nick']
        return IrcTransport(name, conn['host'], conn['port'], nick=nick,
                            user=conn['user'], realname=conn['realname'],
                            channels=conn['channels'], useSsl=conn['ssl'],
                            asciiOnly=conn['ascii_only'],
                            encoding=conn['encoding'])


    def _startConnection(self, entry):
        logConfig.setFileHandler(entry.name,
                                 os.path.join('log',
                                              '{}.log'.format(entry.name)))
        transport = self.createTransport(entry.name, entry.config)
        entry.director = CommunicationDirector(entry.name, transport,
                                               self.dispatcher,
                                               self.registryStore,
                                               self.configStore)
        entry.startTime = time.time()
        entry.director.start()


    def _checkConnection(self, entry):
        """ Restart a connection whose director has exited. """
        d = entry.director
        now = time.time()
        if d is None:
            if now >= entry.nextStart:
                self._startConnection(entry)
            return
        if d.is_alive():
            return
        try:
            d.join()
            self._log.warning("Connection {} closed.".format(entry.name))
        except FatalError:
            raise
        except Exception:
            self._log.exception("Connection {} failed.".format(entry.name))
        entry.director = None
        if now - entry.startTime < FAST_CRASH_TIME:
            entry.crashWait = min(MAX_CRASH_WAIT, entry.crashWait * 2)
            self._log.warning("Immediate crash detected. Backing off "
                              "before next connect.")
        else:
            entry.crashWait = entry.baseWait
        entry.nextStart = now + entry.crashWait
        self._log.info("Reconnecting {} in {} seconds."
                       .format(entry.name, entry.crashWait))


    def reloadModules(self):
        """ Rebuild the module registry from source. On error the old
        modules stay active. """
        try:
            registry = self.registryStore.reloadModules()
        except Exception:
            self._log.exception("Module reload failed; keeping old modules.")
            return False
        settings = readSettings(self._settingsFile, registry.defaults)
        self.configStore.mergeDefaults(settings)
        self.configStore.mergeDefaults(registry.defaults)
        return True


    def loop(self):
        """ The main loop of the chanbot program. """
        try:
            self._log.info("Entered main loop.")
            for entry in self._connections:
                self._startConnection(entry)

            # the only way out is an exception
            while True:
                if self._exitEvent.is_set():
                    self._log.info("User interrupt detected, exiting...")
                    raise SystemExit
                if self._reloadEvent.is_set():
                    self._reloadEvent.clear()
                    self.reloadModules()
                for entry in self._connections:
                    self._checkConnection(entry)
                time.sleep(0.1)
        except (SystemExit, KeyboardInterrupt) as e:
            self._log.info("Encountered stop signal: {}."
                           .format(e.__class__.__name__))
            raise SystemExit
        except FatalError:
            raise
        except Exception:
            self._log.critical("Unknown error.")
            raise
        finally:
            self._cleanup()


    def _cleanup(self):
        self._log.info("******** Shutting down ********")
        directors = [e.director for e in self._connections
                     if e.director is not None]
        for d in directors:
            d.stop()
        for d in directors:
            try:
                d.join(5)
            except Exception:
                self._log.exception("Error shutting down {}."
                                    .format(d.connectionName))
        self._log.info("Bot system shutdown complete.")
