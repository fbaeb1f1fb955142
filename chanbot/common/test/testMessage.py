import unittest
from chanbot.common.message import Message, Text, TargetedText, \
                                   NoResponse, toResponse


class Test(unittest.TestCase):

    def testVerbRequired(self):
        with self.assertRaises(ValueError):
            Message(None, None, None, "", [])

    def testImmutable(self):
        m = Message("a!b@c", "a", "#x", "PRIVMSG", ["#x", "hi"], "hi")
        with self.assertRaises(AttributeError):
            m.payload = "bye"
        self.assertEqual(m.text, "hi")
        self.assertEqual(m.params, ("#x", "hi"))

    def testToResponse(self):
        self.assertIs(toResponse(None), NoResponse)
        self.assertIs(toResponse(""), NoResponse)
        self.assertEqual(toResponse("pong"), Text("pong"))
        self.assertEqual(toResponse(("hi", "rib")), TargetedText("hi", "rib"))
        self.assertIs(toResponse(("", "rib")), NoResponse)
        r = Text("x")
        self.assertIs(toResponse(r), r)
        for bad in [5, ["a"], ("a", "b", "c"), ("a", 3)]:
            with self.assertRaises(TypeError):
                toResponse(bad)

    def testTruth(self):
        self.assertFalse(NoResponse)
        self.assertTrue(Text("x"))
        self.assertNotEqual(Text("x"), TargetedText("x", "#y"))


if __name__ == '__main__':
    unittest.main()
