class IllegalTransitionError(RuntimeError):
    """A flow attempted a state change its graph does not allow"""
