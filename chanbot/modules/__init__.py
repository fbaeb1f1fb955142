""" Modules are contained in this package. Modules are the lowest tier of
the processing chain: the CommunicationDirector reads a message, the
Dispatcher picks one module to answer it, and the module produces the reply.

A module declares everything it answers to once, at load time, in its
_define() classmethod: commands (!name arg1 arg2), triggers (regular
expressions tested against every message), help texts, timeouts and the
configuration keys it reads. Only one handler runs per message; the first
module in the configured order that applies wins.

A handler returns a string (sent back where the message came from), a
(text, target) tuple, a Response object, or None for no reply. Handlers may
block on network I/O, but are cut off after their timeout.

A good module should be focused on a single task, instead of being a
monolithic entity that performs many tasks. """
