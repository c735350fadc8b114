"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Envelope keys as they appear on the wire.
MESSAGE = "Message"
IDENTIFIER = "Identifier"
TYPE = "Type"
STACKTRACE = "stacktrace"

# Message kinds. Requests leave the kind empty.
GENERIC = "Generic"
LOG = "Log"
WARNING = "Warning"
ERROR = "Error"

KINDS = frozenset((GENERIC, LOG, WARNING, ERROR))

# Artificial restriction on outbound commands, guards against accidental
# oversized queries.
MAX_COMMAND_LENGTH = 1000

# Identifiers are positive 32-bit integers.
IDENTIFIER_MIN = 1
IDENTIFIER_MAX = 0x7FFFFFFF
