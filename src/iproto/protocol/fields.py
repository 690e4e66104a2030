"""Protocol constants.

Keep these in one place to avoid magic numbers in request handling. All
values are fixed by the IProto wire format.
"""

# Greeting block layout.
GREETING_SIZE = 128
GREETING_SALT_OFFSET = 64
GREETING_SALT_SIZE = 44
SALT_LENGTH = 20

# Size of the MessagePack-encoded length in front of header+body.
LENGTH_PREFIX_SIZE = 5

# Correlation ids wrap at this value.
SYNC_LIMIT = 100000

# Largest value a select limit can carry.
MAX_LIMIT = 0xffffffff

# Header keys
TYPE = 0x00
SYNC = 0x01

# Body keys
SPACE_ID = 0x10
INDEX_ID = 0x11
LIMIT = 0x12
OFFSET = 0x13
ITERATOR = 0x14
KEY = 0x20
TUPLE = 0x21
FUNCTION_NAME = 0x22
USERNAME = 0x23
EXPRESSION = 0x27
DEF_TUPLE = 0x28
DATA = 0x30
ERROR = 0x31

# Command codes
SELECT = 0x01
INSERT = 0x02
REPLACE = 0x03
UPDATE = 0x04
DELETE = 0x05
CALL_OLD = 0x06
AUTH = 0x07
EVAL = 0x08
UPSERT = 0x09
CALL_NEW = 0x0a
PING = 0x40

# The 'old' call wraps each returned value in a tuple, the 'new' one does not.
CALL = {
    'old': CALL_OLD,
    'new': CALL_NEW,
}

# Response status
OK = 0x00
ERROR_CODE_MASK = 0x7fff

# Iterator codes
ITERATORS = {
    'EQ': 0,
    'REQ': 1,
    'ALL': 2,
    'LT': 3,
    'LE': 4,
    'GE': 5,
    'GT': 6,
    'BITSET_ALL_SET': 7,
    'BITSET_ANY_SET': 8,
    'BITSET_ALL_NOT_SET': 9,
}

EQ = ITERATORS['EQ']

# System spaces
SCHEMA_SPACE = 272
SPACE_SPACE = 280
INDEX_SPACE = 288
FUNC_SPACE = 296
USER_SPACE = 304
PRIV_SPACE = 312
CLUSTER_SPACE = 320

# Indexes of the _space and _index system spaces.
PRIMARY_INDEX = 0
NAME_INDEX = 2

AUTH_MECHANISM = 'chap-sha1'
