import io
import os
import random
from chanbot.modules.BaseModule import BaseModule


SUBJECTS = ('bofh', 'brba', 'dexter')


def readQuotes(fileName):
    """ Read one quote per line; blank lines are skipped. """
    with io.open(fileName, encoding='utf-8', errors='replace') as f:
        return [line.strip() for line in f if line.strip()]


def pickQuote(quotes, number=None):
    """ Return quote number (1-based) or a random one if number is missing
    or out of range. "Speaker | text" becomes "Speaker: text". """
    if not quotes:
        return None
    quote = None
    if number is not None and 1 <= number <= len(quotes):
        quote = quotes[number - 1]
    if quote is None:
        quote = random.choice(quotes)
    return ': '.join(quote.split(' | '))


class QuoteModule(BaseModule):
    """
    Quotes from text files: !bofh, !brba and !dexter answer with a random
    quote, !bofh 12 with the twelfth. The files are read from quote_dir and
    are named after the command, e.g. data/quotes/bofhquotes.
    """
    _name = "Quotes"


    @classmethod
    def _define(cls, d):
        d.describe("Quotes: !bofh, !brba, !dexter [number]")
        d.setDefaultConfig({'quote_dir': "data/quotes"})
        for subject in SUBJECTS:
            d.registerCommand(subject, ['number'], handler=cls.quote)
            d.describe(subject, "!{} [number]: show a quote".format(subject))


    def _subject(self):
        prefix = self.config.get('command_prefix') or '!'
        return self.msg.payload.split()[0][len(prefix):].lower()


    def quote(self, params, user, source, bot):
        subject = self._subject()
        fileName = os.path.join(self.config.get('quote_dir', ""),
                                "{}quotes".format(subject))
        try:
            quotes = readQuotes(fileName)
        except IOError:
            self.errorLog("Could not read quote file {}".format(fileName))
            return None
        number = params['number']
        try:
            number = int(number) if number is not None else None
        except ValueError:
            number = None
        return pickQuote(quotes, number)
