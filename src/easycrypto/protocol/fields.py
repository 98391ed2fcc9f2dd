"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Envelope field names.
ID = "id"
OPERATION = "operation"
METHOD = "method"
DATA = "data"
RESULT = "result"

# Request operations.
CAPABILITIES = "capabilities"
ENCRYPT = "encrypt"
DECRYPT = "decrypt"

OPERATIONS = (CAPABILITIES, ENCRYPT, DECRYPT)

# Operations that name a cipher method.
TRANSFORMS = (ENCRYPT, DECRYPT)
