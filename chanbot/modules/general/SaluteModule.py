from chanbot.modules.BaseModule import BaseModule


REPLY = "I am Dave ! Yognaught and I have the balls!"


class SaluteModule(BaseModule):
    """ Salutes back when somebody salutes ("/me salutes"). """
    _name = "Salute"


    @classmethod
    def _define(cls, d):
        d.describe("Salutes back")
        d.registerTrigger(r'^\x01?(?:ACTION|/me)\s+salutes\x01?$', cls.salute)


    def salute(self, match, user, source):
        if self.protocol == 'irc':
            action = "\x01ACTION salutes\x01"
        else:
            action = "/me salutes"
        return "{}\n{}".format(action, REPLY)
