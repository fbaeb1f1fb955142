import random
from chanbot.modules.BaseModule import BaseModule
from chanbot.util.settingsFile import RESPONSE_KEY


NICK_REPLY = "hell yeah!"


class ResponseModule(BaseModule):
    """
    Canned responses: "!hi" answers with one of the replies listed for "hi"
    in the settings file, e.g.

        resp = "hi" "Moin!" "Tag" "Servus!"

    "!<bot nick>" is answered even without a table entry. Load this module
    after other modules with triggers: it claims every lone "!word".
    """
    _name = "Responses"


    @classmethod
    def _define(cls, d):
        d.describe("Canned responses from the settings file")
        d.setDefaultConfig({RESPONSE_KEY: {}})
        d.registerTrigger(r'^\s*([^\w\s])(\S+)\s*$', cls.respond)


    def respond(self, match, user, source):
        prefix = self.config.get('command_prefix') or '!'
        if match.group(1) != prefix:
            return None
        name = match.group(2)
        replies = self.config.get(RESPONSE_KEY, {}).get(name)
        if not replies:
            nick = getattr(self.bot, 'nick', None)
            if nick and name.lower() == nick.lower():
                return NICK_REPLY
            return None
        if isinstance(replies, str):
            return replies
        return random.choice(replies)
