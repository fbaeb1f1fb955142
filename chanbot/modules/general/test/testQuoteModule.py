import io
import os
import shutil
import tempfile
import unittest
from unittest import mock
from chanbot.common.message import Text, NoResponse
from chanbot.modules.general.QuoteModule import QuoteModule, pickQuote
from chanbot.modules.test.MockBot import MockBot, quietLog


QUOTES = u"""BOFH | It's a hardware problem.

PFY | Have you tried turning it off and on again?
Third quote
"""


class Test(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        for name in ["dispatch", "config", "modules.Quotes"]:
            quietLog(name)

    def setUp(self):
        self.dir = tempfile.mkdtemp()
        with io.open(os.path.join(self.dir, 'bofhquotes'), 'w',
                     encoding='utf-8') as f:
            f.write(QUOTES)
        self.bot = MockBot([QuoteModule], settings={'quote_dir': self.dir})

    def tearDown(self):
        shutil.rmtree(self.dir)

    def testNumbered(self):
        self.assertEqual(self.bot.dispatch("!bofh 1"),
                         Text("BOFH: It's a hardware problem."))
        self.assertEqual(self.bot.dispatch("!BOFH 2"),
                         Text("PFY: Have you tried turning it off and on "
                              "again?"))
        self.assertEqual(self.bot.dispatch("!bofh 3"), Text("Third quote"))

    def testRandom(self):
        with mock.patch('random.choice', side_effect=lambda l: l[-1]):
            for txt in ["!bofh", "!bofh 99", "!bofh 0", "!bofh many"]:
                self.assertEqual(self.bot.dispatch(txt), Text("Third quote"))

    def testMissingFile(self):
        self.assertIs(self.bot.dispatch("!dexter"), NoResponse)
        self.assertIs(self.bot.dispatch("!brba 2"), NoResponse)

    def testPick(self):
        self.assertIsNone(pickQuote([]))
        self.assertEqual(pickQuote(["a | b | c"], 1), "a: b: c")


if __name__ == '__main__':
    unittest.main()
