"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Keys with built-in meaning sent by the server.
ID = "id"
VERSION = "version"
LOAD1 = "load1"
LOAD2 = "load2"
LOAD3 = "load3"
EXIT = "exit"

# Keys only ever sent by a client.
NAME = "name"
NOTIFY = "notify"
DEMAND = "demand"

# Line syntax.
ASSIGN = "="
SEPARATOR = ";"
LINE_END = b"\r\n"

# Lexicon definitions are keyed "L<kind><index>(<mode>)"; the keys they
# define are "Q<kind><index>".
DEFINITION_PREFIX = "L"
KEY_PREFIX = "Q"
MODE_OPEN = "("
DEFINITION_MINIMUM = 6
