""" Protocol parsers. Each transport has one parser that turns whatever the
transport receives (a raw line, a room event) into a Message. """

from chanbot.protocol.IrcParser import IrcParser
from chanbot.protocol.XmppParser import XmppParser


_parsers = {IrcParser.protocol: IrcParser,
            XmppParser.protocol: XmppParser}


def getParser(protocol):
    """ Return a parser for the protocol tag ('irc', 'xmpp'). Raises
    KeyError for unknown protocols. """
    return _parsers[protocol.lower()]()
