""" mIRC formatting codes, for replies that look different on IRC. """

WHITE = 0
BLACK = 1
RED = 4
TEAL = 10


def colorize(text, color, background=None):
    """ Wrap text in colour code color (0-15), optionally on a background
    colour. """
    if background is None:
        return '\x03{:02d}{}\x03'.format(color, text)
    return '\x03{:02d},{:02d}{}\x03'.format(color, background, text)


def bold(text):
    return '\x02{}\x02'.format(text)
