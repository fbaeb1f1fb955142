import io
import os
import shutil
import tempfile
import threading
import unittest
from chanbot.common.exceptions import FatalError
from chanbot.modules.test.MockBot import quietLog
from chanbot.RunProperties import RunProperties
from chanbot.sys.BotSystem import BotSystem, loadConfig, saveConfig


CONFIG = u"""
[bot]
    nick = ribbot
    settings_file = {settings}
[connections]
    [[libera]]
        host = irc.example.org
        channels = "#rib", "#chanbot"
"""


class Test(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        for name in ["", "config", "registry"]:
            quietLog(name)

    def setUp(self):
        self.dir = tempfile.mkdtemp()
        self.configFile = os.path.join(self.dir, 'chanbot.ini')
        self.settingsFile = os.path.join(self.dir, 'settings.conf')

    def tearDown(self):
        shutil.rmtree(self.dir)

    def writeConfig(self, txt):
        with io.open(self.configFile, 'w', encoding='utf-8') as f:
            f.write(txt)

    def testDefaults(self):
        self.writeConfig(CONFIG.format(settings=self.settingsFile))
        c, txt = loadConfig(self.configFile)
        self.assertEqual(c['bot']['nick'], "ribbot")
        self.assertEqual(c['bot']['command_prefix'], "!")
        self.assertEqual(c['bot']['modules'][0], "core.CoreModule")
        conn = c['connections']['libera']
        self.assertEqual(conn['port'], 6667)
        self.assertFalse(conn['ssl'])
        self.assertEqual(conn['channels'], ["#rib", "#chanbot"])
        self.assertEqual(conn['reconnect_wait'], 60)

        saveConfig(c, self.configFile, txt)
        c2, _txt = loadConfig(self.configFile)
        self.assertEqual(c2['connections']['libera']['port'], 6667)
        with io.open(self.configFile, encoding='utf-8') as f:
            self.assertIn("reconnect_wait", f.read())

    def testInvalid(self):
        self.writeConfig(u"[connections]\n    [[x]]\n"
                         u"        host = h\n        port = none\n")
        with self.assertRaises(FatalError):
            loadConfig(self.configFile)

        self.writeConfig(u"[connections]\n    [[x]]\n        port = 1\n")
        with self.assertRaises(FatalError):
            loadConfig(self.configFile)

    def testSystem(self):
        self.writeConfig(CONFIG.format(settings=self.settingsFile))
        with io.open(self.settingsFile, 'w', encoding='utf-8') as f:
            f.write(u"title = off\nresp = \"hi\" \"Moin!\"\n")
        props = RunProperties(False, self.configFile, os.getcwd())
        bsys = BotSystem(props, threading.Event())
        config = bsys.configStore.current
        self.assertIs(config['title'], False)
        self.assertIs(config['pony'], False)
        self.assertEqual(config['resp'], {'hi': ["Moin!"]})
        self.assertEqual(config['command_prefix'], "!")
        keys = [m.key for m in bsys.registryStore.current]
        self.assertEqual(keys[0], "Core")
        self.assertIn("LinkTitle", keys)

        transport = bsys.createTransport('libera',
                                         bsys._config['connections']['libera'])
        self.assertEqual(transport.nick, "ribbot")
        self.assertEqual(transport.channels, ["#rib", "#chanbot"])

        self.assertTrue(bsys.reloadModules())
        self.assertIs(bsys.configStore.current['title'], False)


if __name__ == '__main__':
    unittest.main()
