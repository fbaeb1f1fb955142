from chanbot.common.message import Message
from chanbot.common.exceptions import MalformedMessageError


class XmppParser(object):
    """ Adapts a multi-user chat room event to a Message. The transport
    hands over (room, nick, text) for every groupchat message; the room is
    always the source, so replies go back into the room. """

    protocol = 'xmpp'
    verb = 'GROUPCHAT'

    def parse(self, event):
        try:
            room, nick, text = event
        except (TypeError, ValueError):
            raise MalformedMessageError(event)
        if not room or not nick or not isinstance(text, str):
            raise MalformedMessageError(event)
        return Message(prefix="{}/{}".format(room, nick),
                       user=nick,
                       source=room,
                       verb=self.verb,
                       params=[room, text],
                       payload=text)
