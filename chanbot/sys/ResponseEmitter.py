from chanbot.common.message import Text, TargetedText


class ResponseEmitter(object):
    """ Turns a Response into (target, text) pairs for the transport.

    Text goes back to where the message came from (the channel, or the
    sender of a private message); TargetedText goes to its own target. If
    the transport cannot send embedded newlines, every line of the body is
    sent on its own and blank lines are dropped.
    """

    def __init__(self, multiline=False):
        self.multiline = multiline

    def emit(self, response, msg):
        if not response:
            return []
        if isinstance(response, TargetedText):
            target = response.target
        elif isinstance(response, Text):
            target = msg.source
        else:
            raise TypeError("Unknown response {!r}".format(response))
        if not target:
            return []
        if self.multiline:
            return [(target, response.body)]
        return [(target, line) for line in response.body.splitlines()
                if line.strip()]
