import unittest
from unittest import mock
from chanbot.common.message import Text, NoResponse
from chanbot.modules.general.PonyModule import PonyModule
from chanbot.modules.test.MockBot import MockBot, quietLog


class Test(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        for name in ["dispatch", "config", "modules.Pony"]:
            quietLog(name)

    def setUp(self):
        self.bot = MockBot([PonyModule])

    def testOffByDefault(self):
        with mock.patch('random.random', return_value=0.0):
            self.assertIs(self.bot.dispatch("I like ponies"), NoResponse)

    def testYay(self):
        self.bot.configStore.set('pony', True)
        with mock.patch('random.random', return_value=0.0):
            self.assertEqual(self.bot.dispatch("I like PONIES"),
                             Text("PONIES yay."))
            self.assertEqual(self.bot.dispatch("ponnyyyy"),
                             Text("ponny yay."))
            self.assertIs(self.bot.dispatch("!ponies"), NoResponse)
        with mock.patch('random.random', return_value=0.9):
            self.assertIs(self.bot.dispatch("pony"), NoResponse)


if __name__ == '__main__':
    unittest.main()
