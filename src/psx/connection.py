""" The :class:`Connection` drives a single persistent link to a PSX Main
    Server (or a Router/SwitchPSX instance in front of one). It reacts to
    the handful of keys with built-in meaning, learns the lexicon the
    server pushes when a client first connects, subscribes to the
    variables the client asked for, and dispatches every received message
    to the callback registered under its human name.

    A typical client looks something like this::

        def position(connection, message):
            pitch = message.value_at(0)

        connection = psx.Connection('localhost:10747', 'poswatch')
        connection.register('PiBaHeAlTas', position)
        connection.subscribe('PiBaHeAlTas')
        connection.connect()
        connection.listen()
"""

import enum
import logging
import threading

from . import config
from . import transport
from .errors import ConnectionBusy, LexiconSyntaxError, NotConnected, ShortWrite, TransportFailure
from .protocol import fields
from .protocol.lexicon import Lexicon
from .protocol.message import Message

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    DISCONNECTED = 'disconnected'
    NEW = 'new'
    ACQUIRING1 = 'acquiring1'
    ACQUIRING2 = 'acquiring2'
    RUNNING = 'running'
    FAILED = 'failed'
    ENDED = 'ended'
    LISTENER_EXITED = 'listener exited'


# A new connection is only permitted from these phases; anywhere else, a
# listener may still be winding down.

_reconnectable = (Phase.DISCONNECTED, Phase.LISTENER_EXITED)


def _open_transport(server):
    return transport.connect(server, timeout=config.connect_timeout())



class Connection:
    """ Manage a connection to *server*, a 'host:port' string, reporting
        *client_name* (and *instance_name*, if set) to a Router/SwitchPSX.
        Both default to the values in :mod:`psx.config`. The *opener* is
        the callable used to establish the transport; it receives the
        server string and returns a :class:`psx.transport.base.Transport`.

        The *server*, *client_name* and *instance_name* may be changed at
        any time, but changes only take effect on the next connection.

        Callbacks are registered in :attr:`hooks`, keyed by the decoded
        (human) name of the message; :func:`register` is a convenience
        wrapper. Each callback is invoked as ``callback(connection,
        message)`` on the listener thread. A slow callback delays every
        message after it.

        Outbound writes are not serialized against each other; if several
        threads send on the same connection, the caller must serialize them.

        :ivar hooks: Dictionary of callbacks, keyed by human name.
        :ivar failure: The exception that ended the last background listener, if any.
    """

    def __init__(self, server=None, client_name=None, instance_name='', opener=None):

        if server is None:
            server = config.server()

        if client_name is None:
            client_name = config.client_name()

        if opener is None:
            opener = _open_transport

        self.server = server
        self.client_name = client_name
        self.instance_name = instance_name
        self.hooks = dict()
        self.failure = None
        self.thread = None

        self.transport = None
        self.opener = opener

        self._id = None
        self._version = None
        self._phase = Phase.DISCONNECTED
        self._notify = list()
        self._lexicon = Lexicon()

        self._listening = False
        self._listener_lock = threading.Lock()


    def __enter__(self):
        self.connect()
        return self


    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.disconnect()


    def __repr__(self):
        return '<Connection %s %s>' % (self.server, self._phase.value)


    @property
    def connected(self):
        """ True if there is a transport, and it has not been closed out
            from under the connection.
        """

        transport = self.transport
        return transport is not None and transport.is_open


    @property
    def id(self):
        """The client id assigned by the server, or None if not yet known."""
        return self._id


    @property
    def lexicon(self):
        return self._lexicon


    @property
    def phase(self):
        """The current :class:`Phase` of the connection."""
        return self._phase


    @phase.setter
    def phase(self, phase):
        if phase is not self._phase:
            logger.info("%s: %s -> %s", self.server, self._phase.value, phase.value)
        self._phase = phase


    @property
    def subscriptions(self):
        """The names requested via :func:`subscribe`, in order."""
        return tuple(self._notify)


    @property
    def version(self):
        """The software version reported by the server, or None."""
        return self._version


    def connect(self):
        """ Connect to the server. Calling :func:`connect` on a connection
            that is already connected does nothing; :class:`ConnectionBusy`
            is raised if a previous listener has not finished exiting. Any
            failure to establish the connection is raised as
            :class:`TransportFailure`.
        """

        if self.transport is not None:
            return

        if self._phase not in _reconnectable:
            raise ConnectionBusy('connection is still busy and unable to reconnect')

        self.transport = self.opener(self.server)
        self._id = None
        self._version = None
        self.failure = None

        logger.info("connected to %s", self.server)
        self.phase = Phase.NEW


    def disconnect(self):
        """ Tell the server we are leaving, and close the transport. Any
            running listener will see its next read fail and exit.
        """

        transport = self.transport
        if transport is None:
            return

        listening = self._listening

        try:
            self._send_line(fields.EXIT)
        except (TransportFailure, ShortWrite) as e:
            logger.warning("%s: could not send exit: %s", self.server, e)

        self.transport = None

        try:
            transport.close()
        except TransportFailure as e:
            logger.warning("%s: %s", self.server, e)

        logger.info("disconnected from %s", self.server)

        # A running listener moves the phase along itself once it notices
        # the transport is gone.

        if listening == False:
            self.phase = Phase.DISCONNECTED


    def listen(self):
        """ Run the listener loop in the calling thread: read a line, apply
            any built-in reaction, dispatch to the registered callback, and
            repeat. The loop blocks on each read with no timeout.

            The loop ends when the server sends 'exit', when the connection
            is closed locally via :func:`disconnect`, or when the transport
            fails. In every case the connection is cleaned up and left in
            the LISTENER_EXITED phase, ready for another :func:`connect`; a
            transport failure is then re-raised for the caller to handle.
        """

        transport = self._claim_listener()
        self._run(transport)


    def start(self):
        """ Run :func:`listen` in a background daemon thread, and return
            the thread. Errors that end the listener are logged, and kept
            as :attr:`failure`.
        """

        # The listener is claimed here, not in the new thread, so that a
        # second listener can't sneak in before the thread gets going.

        transport = self._claim_listener()

        thread = threading.Thread(target=self._listen_background, args=(transport,))
        thread.name = 'psx listener ' + self.server
        thread.daemon = True

        self.thread = thread
        thread.start()

        return thread


    def _claim_listener(self):
        """ Mark the connection as having a running listener, and return
            the transport it will read from.
        """

        with self._listener_lock:
            if self._listening == True:
                raise ConnectionBusy('a listener is already running')

            transport = self.transport
            if transport is None:
                raise NotConnected('connection is not currently open')

            self._listening = True

        return transport


    def _listen_background(self, transport):

        try:
            self._run(transport)
        except TransportFailure as e:
            self.failure = e
            logger.warning("%s: listener failed: %s", self.server, e)
        except Exception as e:
            # Anything else ending the loop, such as a client name that
            # can't be encoded, is kept the same way.
            self.failure = e
            logger.exception("%s: listener aborted", self.server)


    def _run(self, transport):

        failure = None

        try:
            while True:
                try:
                    line = transport.readline()
                except TransportFailure as e:
                    if self.transport is transport:
                        self.phase = Phase.FAILED
                        failure = e
                    else:
                        # Closed locally by disconnect().
                        self.phase = Phase.ENDED
                    break

                logger.debug("%s: received %s", self.server, line)

                message = Message.parse(line, self._lexicon)
                self._react(message)
                self._dispatch(message)

                if self._phase == Phase.ENDED:
                    break

        finally:
            self.disconnect()
            self.phase = Phase.LISTENER_EXITED

            with self._listener_lock:
                self._listening = False

        if failure is not None:
            raise failure


    def wait(self, timeout=None):
        """ Block until a listener started with :func:`start` exits. Returns
            True if it exited, False if the *timeout* expired first.
        """

        thread = self.thread
        if thread is None:
            return True

        thread.join(timeout)
        return not thread.is_alive()


    def _react(self, message):
        """ Handle the keys that have a built-in meaning. This runs before
            any callback sees the message.
        """

        key = message.key

        if key == fields.ID:
            try:
                self._id = int(message.value)
            except ValueError:
                logger.warning("%s: unusable client id %r", self.server, message.value)
                self._id = None
            self._send_name()

        elif key == fields.VERSION:
            self._version = message.value

        elif key == fields.LOAD1:
            # A new connection can't ask for a filtered feed until the
            # lexicon is in; the first load1 is the cue that it is.
            if self._phase == Phase.NEW:
                self._send_notify()
            self.phase = Phase.ACQUIRING1

        elif key == fields.LOAD2:
            self.phase = Phase.ACQUIRING2

        elif key == fields.LOAD3:
            self.phase = Phase.RUNNING

        elif key == fields.EXIT:
            self.phase = Phase.ENDED

        elif message.has_value and self._phase == Phase.NEW and key.startswith(fields.DEFINITION_PREFIX):
            try:
                self._lexicon.register(message)
            except LexiconSyntaxError as e:
                logger.debug("%s: ignoring lexicon line %r: %s", self.server, message.wire_string(), e)


    def _dispatch(self, message):
        """ Invoke the callback, if any, registered for the decoded name of
            *message*. Exceptions raised by the callback are logged and do
            not interrupt the listener; a :class:`ShortWrite` is the one
            exception, since the connection cannot continue after one.
        """

        name = message.decoded_key
        callback = self.hooks.get(name)

        if callback is None:
            return

        try:
            callback(self, message)
        except ShortWrite:
            raise
        except Exception:
            logger.exception("%s: callback for %s failed", self.server, name)


    def register(self, human_name, callback):
        """ Register a *callback* for messages whose decoded name is
            *human_name*. Only one callback is kept per name; registering
            again replaces the previous one.
        """

        if callable(callback):
            pass
        else:
            raise TypeError('the registered callback must be callable')

        self.hooks[human_name] = callback


    def subscribe(self, human_name):
        """ Add *human_name* to the list of variables requested from a
            Router/SwitchPSX. The list is sent once, when the first load1
            arrives on a new connection; names the lexicon does not know by
            then are left out.
        """

        if human_name in self._notify:
            return

        self._notify.append(human_name)


    def _send_name(self):

        name = self.client_name
        if self.instance_name:
            name += fields.SEPARATOR + self.instance_name

        self.send(self.new_pair(fields.NAME, name))


    def _send_notify(self):

        keys = list()

        for human_name in self._notify:
            key = self._lexicon.key_for(human_name)
            if key != '':
                keys.append(key)

        if keys:
            self.send(self.new_pair(fields.NOTIFY, fields.SEPARATOR.join(keys)))


    def new_message(self):
        """Return a blank :class:`Message` linked to this connection's lexicon."""
        return Message(self._lexicon)


    def new_pair(self, human_name, value):
        """ Return a :class:`Message` for the *human_name* and *value* pair,
            with the key encoded through the lexicon where possible.
        """

        message = self.new_message()
        message.set_decoded_key(human_name)
        message.has_value = True
        message.value = str(value)
        return message


    def send(self, message):
        """ Send a :class:`Message`. :class:`NotConnected` is raised if there
            is no live connection.
        """

        self._send_line(message.wire_string())


    def set(self, human_name, value):
        """Send a new *value* for the variable *human_name*."""
        self.send(self.new_pair(human_name, value))


    def demand(self, human_name):
        """ Ask the server to start sending a demand-mode variable; these
            are not included in the regular feed until requested.
        """

        key = self._lexicon.key_for(human_name)
        if key == '':
            key = human_name

        self.send(self.new_pair(fields.DEMAND, key))


    def _send_line(self, line):

        transport = self.transport
        if transport is None:
            raise NotConnected('connection is not currently open')

        data = line.encode('ascii') + fields.LINE_END
        written = transport.write(data)

        if written < len(data):
            # A partial protocol line can't be resumed or retracted.
            raise ShortWrite("short write to %s: %d of %d bytes" % (self.server, written, len(data)))

        logger.debug("%s: sent %s", self.server, line)


# end of class Connection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
