import re
import unittest
from chanbot.common.exceptions import RegistrationError, FatalError
from chanbot.modules.BaseModule import BaseModule
from chanbot.sys.registry import ModuleDefinition, Registry, \
                                 RegistryStore, registryFromClasses, \
                                 buildRegistry, DEFAULT_TIMEOUT


def handler(*args):
    return None


class AlphaModule(BaseModule):
    @classmethod
    def _define(cls, d):
        d.describe("first")
        d.setDefaultConfig({'shared': 1, 'alpha': True})
        d.registerCommand('Echo', ['a', 'b'], handler=handler)
        d.registerTrigger(r'alpha', handler)


class BetaModule(BaseModule):
    _name = "B"

    @classmethod
    def _define(cls, d):
        d.setDefaultConfig({'shared': 2})
        d.registerCommand('echo', ['x'], handler=handler)
        d.registerCommand('other', handler=handler)


class Test(unittest.TestCase):

    def testDefinition(self):
        d = ModuleDefinition("Test")
        d.describe("module help")
        d.describe("cmd", "command help")
        d.describe({'other': "more help"})
        d.setTimeout('cmd', 2)
        d.registerCommand('cmd', ['a', 'b'], handler=handler, required=1)
        d.registerTrigger(r'(\d+)', handler, timeout=3)
        d.restrictProtocols('IRC')
        m = d.build()
        self.assertEqual(m.key, "Test")
        self.assertEqual(m.description, "module help")
        self.assertEqual(m.descriptions['cmd'], "command help")
        self.assertEqual(m.descriptions['other'], "more help")
        cmd = m.findCommand('CMD')
        self.assertEqual(cmd.timeout, 2)
        self.assertEqual(cmd.identity, "Test.cmd")
        self.assertEqual(m.triggers[0].timeout, 3)
        self.assertEqual(m.timeouts['cmd'], 2)
        self.assertTrue(m.allowsProtocol('irc'))
        self.assertFalse(m.allowsProtocol('xmpp'))

    def testDefaultTimeout(self):
        d = ModuleDefinition("Test")
        d.registerCommand('cmd', handler=handler)
        d.registerTrigger('x', handler)
        m = d.build()
        self.assertEqual(m.commands[0].timeout, DEFAULT_TIMEOUT)
        self.assertEqual(m.triggers[0].timeout, DEFAULT_TIMEOUT)

    def testFrozenAfterBuild(self):
        d = ModuleDefinition("Test")
        d.build()
        with self.assertRaises(RegistrationError):
            d.registerCommand('late', handler=handler)
        with self.assertRaises(RegistrationError):
            d.build()

    def testInvalidTrigger(self):
        d = ModuleDefinition("Test")
        for pattern in [42, '(unclosed', '*x']:
            with self.assertRaises(TypeError):
                d.registerTrigger(pattern, handler)
            with self.assertRaises(RegistrationError):
                d.registerTrigger(pattern, handler)
        with self.assertRaises(RegistrationError):
            d.registerTrigger('ok', "not callable")
        d.registerTrigger(re.compile('ok'), handler)

    def testInvalidCommand(self):
        d = ModuleDefinition("Test")
        d.registerCommand('cmd', handler=handler)
        with self.assertRaises(RegistrationError):
            d.registerCommand('CMD', handler=handler)
        with self.assertRaises(RegistrationError):
            d.registerCommand('two words', handler=handler)
        with self.assertRaises(RegistrationError):
            d.registerCommand('dup', ['a', 'a'], handler=handler)
        with self.assertRaises(RegistrationError):
            d.registerCommand('rest', ['a'], handler=handler, rest='a')
        with self.assertRaises(RegistrationError):
            d.registerCommand('req', ['a'], handler=handler, required=2)
        with self.assertRaises(RegistrationError):
            d.registerCommand('nohandler', ['a'])
        with self.assertRaises(RegistrationError):
            d.registerCommand('slow', handler=handler, timeout=0)
        with self.assertRaises(RegistrationError):
            d.registerCommand('slow', handler=handler, timeout="5")

    def testInvalidTimeoutAndDefaults(self):
        d = ModuleDefinition("Test")
        with self.assertRaises(RegistrationError):
            d.setTimeout('cmd', -1)
        with self.assertRaises(TypeError):
            d.setDefaultConfig(['title'])
        d.setTimeout('missing', 3)
        with self.assertRaises(RegistrationError):
            d.build()

    def testAccepts(self):
        d = ModuleDefinition("Test")
        d.registerCommand('plain', ['a', 'b'], handler=handler, required=1)
        d.registerCommand('rest', ['a'], handler=handler, required=1,
                          rest='more')
        m = d.build()
        plain, rest = m.commands
        self.assertFalse(plain.accepts(0))
        self.assertTrue(plain.accepts(1))
        self.assertTrue(plain.accepts(2))
        self.assertFalse(plain.accepts(3))
        self.assertFalse(rest.accepts(0))
        self.assertTrue(rest.accepts(10))

    def testMapParams(self):
        d = ModuleDefinition("Test")
        d.registerCommand('plain', ['a', 'b'], handler=handler)
        d.registerCommand('rest', ['a'], handler=handler, rest='more')
        plain, rest = d.build().commands
        self.assertEqual(dict(plain.mapParams(["x"])), {'a': "x", 'b': None})
        self.assertEqual(dict(plain.mapParams(["x", "y", "z"])),
                         {'a': "x", 'b': "y"})
        self.assertEqual(dict(rest.mapParams(["x", "y", "z"])),
                         {'a': "x", 'more': ["y", "z"]})
        self.assertEqual(dict(rest.mapParams([])), {'a': None, 'more': []})

    def testRegistryOrder(self):
        registry = registryFromClasses([AlphaModule, BetaModule])
        self.assertEqual([m.key for m in registry.loadedModules],
                         ["Alpha", "B"])
        self.assertEqual(registry.commandNames(), ["echo", "other"])
        self.assertEqual([c.moduleKey for c in registry.commandsNamed('ECHO')],
                         ["Alpha", "B"])
        self.assertEqual(registry.defaults['shared'], 1)
        self.assertTrue(registry.defaults['alpha'])
        self.assertIs(registry.findModule('alpha').moduleClass, AlphaModule)
        self.assertIsNone(registry.findModule('gamma'))

    def testDuplicateModule(self):
        with self.assertRaises(RegistrationError):
            registryFromClasses([AlphaModule, AlphaModule])

    def testImport(self):
        registry = buildRegistry(['core.CoreModule'], 'chanbot.modules')
        self.assertEqual(registry.loadedModules[0].key, "Core")
        with self.assertRaises(FatalError):
            buildRegistry(['NoSuchModule'], 'chanbot.modules')

    def testStoreSwap(self):
        store = RegistryStore(['core.CoreModule'], 'chanbot.modules')
        self.assertEqual(len(store.current), 0)
        old = store.current
        new = store.load()
        self.assertIsNot(old, new)
        self.assertEqual(len(old), 0)
        self.assertIs(store.current, new)
        reloaded = store.reloadModules()
        self.assertIs(store.current, reloaded)
        self.assertEqual([m.key for m in reloaded], ["Core"])

    def testFailedReloadKeepsOldRegistry(self):
        store = RegistryStore(['core.CoreModule'], 'chanbot.modules')
        registry = store.load()
        store._moduleNames.append('NoSuchModule')
        with self.assertRaises(FatalError):
            store.reloadModules()
        self.assertIs(store.current, registry)

    def testEmptyRegistry(self):
        self.assertEqual(Registry().commandNames(), [])


if __name__ == '__main__':
    unittest.main()
