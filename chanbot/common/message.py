""" The protocol-independent message model and the replies a handler can
produce. A Message is built once per inbound line by a protocol parser and
never changes afterwards. """

from collections import namedtuple


CHANNEL_PREFIXES = ('#', '&', '!', '+')


class Message(namedtuple('Message', ['prefix', 'user', 'source', 'verb',
                                     'params', 'payload'])):
    """ One inbound line. params is a tuple; the trailing payload, when
    present, is also the last element of params. """
    __slots__ = ()

    def __new__(cls, prefix, user, source, verb, params=(), payload=None):
        if not verb:
            raise ValueError("A message needs a verb")
        return super(Message, cls).__new__(
                cls, prefix, user, source, verb, tuple(params), payload)

    @property
    def text(self):
        return self.payload

    @property
    def isChannel(self):
        return isChannelName(self.source)


def isChannelName(name):
    return bool(name) and name[0] in CHANNEL_PREFIXES


class Response(object):
    """ Base class for handler replies. """
    __slots__ = ()

    def __bool__(self):
        return True


class _NoResponse(Response):
    __slots__ = ()

    def __bool__(self):
        return False

    def __repr__(self):
        return "NoResponse"


NoResponse = _NoResponse()


class Text(Response, namedtuple('Text', ['body'])):
    """ Reply sent back to where the message came from. """
    __slots__ = ()


class TargetedText(Response, namedtuple('TargetedText', ['body', 'target'])):
    """ Reply sent to an explicit target instead of the message source. """
    __slots__ = ()


def toResponse(value):
    """ Convert whatever a handler returned to a Response.

        None, ""          -> NoResponse
        "text"            -> Text("text")
        ("text", target)  -> TargetedText("text", target)

    Responses are passed through unchanged. Anything else is a TypeError.
    """
    if isinstance(value, Response):
        return value
    if value is None:
        return NoResponse
    if isinstance(value, str):
        return Text(value) if value else NoResponse
    if isinstance(value, tuple) and len(value) == 2:
        body, target = value
        if body is None or body == "":
            return NoResponse
        if not isinstance(body, str) or not isinstance(target, str):
            raise TypeError("Targeted replies must be (str, str), not {!r}"
                            .format(value))
        return TargetedText(body, target)
    raise TypeError("Handler returned unsupported value {!r}".format(value))
