import random
from chanbot.modules.BaseModule import BaseModule


class PonyModule(BaseModule):
    """
    Cheers when somebody mentions ponies, about every other time. Off
    unless the pony setting is on (!set pony=on).
    """
    _name = "Pony"
    chance = 0.5


    @classmethod
    def _define(cls, d):
        d.describe("ponies yay.")
        d.setDefaultConfig({'pony': False})
        d.registerTrigger(r'(?i)(pon{1,2}[yi]e?s*)', cls.yay)


    def yay(self, match, user, source):
        prefix = self.config.get('command_prefix') or '!'
        if self.msg.payload.startswith(prefix):
            return None
        if self.config.get('pony') and random.random() < self.chance:
            return "{} yay.".format(match.group(1))
        return None
