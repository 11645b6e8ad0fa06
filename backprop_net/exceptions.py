class ContractViolation(ValueError):
    """ Raised when a vector, topology or configuration does not fit the
    network it is handed to. The network is left untouched.
    """


class MalformedRecord(ContractViolation):
    """ Raised when a training record cannot be parsed
    """
