import socket
import ssl
import logging
import threading
from unidecode import unidecode
from chanbot.common.exceptions import TransportError


# numerics after which the server accepts JOIN
_WELCOME = ('001', '376', '422')
_NICK_IN_USE = '433'


class IrcTransport(object):
    """ The socket side of one IRC connection.

    The transport connects and registers, answers PING, joins the
    configured channels once the server has welcomed us, and sends
    PRIVMSGs. Everything else is left to the CommunicationDirector, which
    reads lines with receive() and hands server control messages back
    through handleControl().
    """
    protocol = 'irc'
    supportsMultiline = False

    def __init__(self, name, host, port=6667, nick='chanbot', user='chanbot',
                 realname='chanbot', channels=(), useSsl=False,
                 asciiOnly=False, encoding='utf-8', pollInterval=1.0):
        self.name = name
        self.host = host
        self.port = port
        self.nick = nick
        self.user = user
        self.realname = realname
        self.channels = list(channels)
        self.useSsl = useSsl
        self.asciiOnly = asciiOnly
        self.encoding = encoding
        self.joined = set()
        self._pollInterval = pollInterval
        self._sock = None
        self._buf = b''
        self._welcomed = False
        self._sendLock = threading.Lock()
        self._log = logging.getLogger(name)


    @property
    def connected(self):
        return self._sock is not None


    def _openSocket(self):
        sock = socket.create_connection((self.host, self.port), timeout=60)
        if self.useSsl:
            context = ssl.create_default_context()
            sock = context.wrap_socket(sock, server_hostname=self.host)
        return sock


    def connect(self):
        self._log.info("Connecting to {}:{}{}..."
                       .format(self.host, self.port,
                               " (ssl)" if self.useSsl else ""))
        try:
            self._sock = self._openSocket()
        except (socket.error, ssl.SSLError) as e:
            raise TransportError("Could not connect to {}:{}: {}"
                                 .format(self.host, self.port, e))
        self._sock.settimeout(self._pollInterval)
        self._buf = b''
        self._welcomed = False
        self.joined = set()
        self._send("NICK {}".format(self.nick))
        self._send("USER {} 0 * :{}".format(self.user, self.realname))


    def close(self, reason="Bye"):
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            with self._sendLock:
                sock.sendall(self._encode("QUIT :{}".format(reason)))
        except (socket.error, ssl.SSLError):
            pass
        try:
            sock.close()
        except socket.error:
            self._log.debug("Error closing socket.")
        self._log.info("Connection closed.")


    def receive(self):
        """ Return the next line from the server without its line ending, or
        None if nothing arrived within the poll interval. Raises
        TransportError when the connection is gone. """
        while b'\n' not in self._buf:
            if self._sock is None:
                raise TransportError("Not connected")
            try:
                data = self._sock.recv(4096)
            except socket.timeout:
                return None
            except (socket.error, ssl.SSLError) as e:
                raise TransportError("Error reading from {}: {}"
                                     .format(self.host, e))
            if not data:
                raise TransportError("Connection closed by {}"
                                     .format(self.host))
            self._buf += data
        line, self._buf = self._buf.split(b'\n', 1)
        txt = line.rstrip(b'\r').decode(self.encoding, 'replace')
        self._log.debug("<< {}".format(txt))
        return txt


    def handleControl(self, msg):
        """ React to server housekeeping. Returns True if msg was consumed
        here and needs no dispatching. """
        verb = msg.verb
        if verb == 'PING':
            self._send("PONG :{}".format(msg.payload or self.host))
            return True
        if verb in _WELCOME:
            if not self._welcomed:
                self._welcomed = True
                for channel in self.channels:
                    self.join(channel)
            return True
        if verb == _NICK_IN_USE:
            self.nick += '_'
            self._log.info("Nick in use; trying {}".format(self.nick))
            self._send("NICK {}".format(self.nick))
            return True
        if verb == 'NICK' and msg.user == self.nick and msg.payload:
            self.nick = msg.payload
            return True
        if verb == 'ERROR':
            raise TransportError("Server error: {}".format(msg.payload))
        return False


    def join(self, channel):
        self._send("JOIN {}".format(channel))
        self.joined.add(channel)


    def say(self, target, text):
        if self.asciiOnly:
            text = unidecode(text)
        for line in text.splitlines():
            if line:
                self._send("PRIVMSG {} :{}".format(target, line))


    def _encode(self, line):
        line = line.replace('\r', ' ').replace('\n', ' ')
        return (line + '\r\n').encode(self.encoding, 'replace')


    def _send(self, line):
        if self._sock is None:
            raise TransportError("Not connected")
        self._log.debug(">> {}".format(line))
        try:
            with self._sendLock:
                self._sock.sendall(self._encode(line))
        except (socket.error, ssl.SSLError) as e:
            raise TransportError("Error writing to {}: {}"
                                 .format(self.host, e))
