class FatalError(Exception):
    """ An error that should stop the bot instead of being retried. The
    main loop logs it and refuses to go on running partially configured. """
    pass


class RegistrationError(FatalError):
    """ A module definition is invalid (bad pattern, duplicate command,
    malformed timeout or parameter list). Raised at load time. """
    pass


class InvalidPatternError(RegistrationError, TypeError):
    """ A trigger pattern is not a valid regular expression. """
    pass


class MalformedMessageError(ValueError):
    """ A raw line does not match the grammar of its transport. """
    def __init__(self, line):
        self.line = line
        super(MalformedMessageError, self).__init__(
                "Malformed message: {!r}".format(line))


class TransportError(IOError):
    """ The connection to the chat server failed or was closed. """
    pass
