import re
from chanbot.modules.BaseModule import BaseModule
from chanbot.util.textProcessing import stringToBool, boolToString


# "key=value", "key = value" or "key value"
_setRegex = re.compile(r"^(\w+)\s*(?:=\s*|\s+)(\S+)$")


class CoreModule(BaseModule):
    """
    The built-in commands: !ping, !list, !help and !set.

    !set only changes boolean configuration keys (title, pony, ...); the
    change is shared by all connections but not written to the settings
    file.
    """
    _name = "Core"


    @classmethod
    def _define(cls, d):
        d.describe("Core commands of the bot")
        d.registerCommand('ping', handler=cls.ping)
        d.describe('ping', "Check if the bot is alive")
        d.registerCommand('list', handler=cls.listModules)
        d.describe('list', "List all loaded modules")
        d.registerCommand('help', ['name'], handler=cls.help)
        d.describe('help', "!help [module|command]: show help")
        d.registerCommand('set', ['key'], handler=cls.set, required=1,
                          rest='value')
        d.describe('set', "!set <key>=<on|off|1|0>: switch a feature on "
                          "or off")


    def ping(self, params, user, source, bot):
        return "pong"


    def _registry(self, bot):
        return bot.registryStore.current


    def _prefix(self):
        return self.config.get('command_prefix') or '!'


    def listModules(self, params, user, source, bot):
        keys = [module.key for module in self._registry(bot)]
        return "Available Modules: {}".format(', '.join(keys))


    def help(self, params, user, source, bot):
        registry = self._registry(bot)
        prefix = self._prefix()
        name = params['name']
        if name is None:
            return "Commands: {}".format(
                    ', '.join(prefix + n for n in registry.commandNames()))
        if name.startswith(prefix):
            name = name[len(prefix):]
        module = registry.findModule(name)
        if module is not None and module.description:
            return "{}: {}".format(module.key, module.description)
        for module in registry:
            desc = module.descriptions.get(name.lower())
            if desc is not None:
                return "{}{}: {}".format(prefix, name.lower(), desc)
        return "No help for {}.".format(name)


    def _usage(self):
        return "Usage: {}set <key>=<on|off|1|0>".format(self._prefix())


    def set(self, params, user, source, bot):
        m = _setRegex.match(' '.join([params['key']] + params['value']))
        if m is None:
            return self._usage()
        key, value = m.group(1).lower(), m.group(2)
        if not isinstance(self.config.get(key), bool):
            return self._usage()
        try:
            newValue = stringToBool(value)
        except ValueError:
            return self._usage()
        bot.configStore.set(key, newValue)
        self.log("{} set {} to {}".format(user, key, newValue))
        return "{} turned {}".format(key, boolToString(newValue))
