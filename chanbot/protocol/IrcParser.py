import re
from chanbot.common.message import Message, isChannelName
from chanbot.common.exceptions import MalformedMessageError


class IrcParser(object):
    """ Turns one line received from an IRC server into a Message.

    [:<prefix> ]<VERB>( <param>)*( :<trailing>)?

    The prefix may carry the sender as "nick!user@host". Every parameter,
    including the trailing one, ends up in params; the last parameter is
    also the payload. The source is params[0] if that is a channel name,
    the sender's nick otherwise.

    Servers send verbs in upper case; a line whose first word is not an
    upper-case verb or a three-digit numeric is rejected.
    """

    protocol = 'irc'

    _lineRegex = re.compile(r"""
        ^
        (?::((?:([^!@\ ]+)!)?[^\ ]+)\ +)?   # prefix, nick
        ([A-Z]+|[0-9]{3})                   # verb, upper case only: a
                                            # lower-case first word means
                                            # the line is plain text
        ((?:\ +[^:\ ][^\ ]*)*)              # middle params
        (?:\ +:(.*?))?                      # trailing
        \ *$
        """, re.VERBOSE | re.DOTALL)

    def parse(self, raw):
        if raw is None:
            raise MalformedMessageError(raw)
        line = raw.rstrip("\r\n")
        m = self._lineRegex.match(line)
        if m is None:
            raise MalformedMessageError(raw)
        prefix, user, verb, middle, trailing = m.groups()
        params = middle.split()
        if trailing is not None:
            params.append(trailing)
        payload = params[-1] if params else None
        source = None
        if params and params[0]:
            source = params[0] if isChannelName(params[0]) else user
        return Message(prefix, user, source, verb, params, payload)


_parser = IrcParser()


def parse(raw):
    """ Parse with a shared parser; IrcParser holds no state. """
    return _parser.parse(raw)
