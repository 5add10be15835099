"""Exceptions shared across the generation core."""


class InvariantViolation(RuntimeError):
    """Raised when a structural invariant of a layer or maze is broken.

    Examples are joining a cell with a neighbor that is not part of the layer,
    or a traversal reaching the same cell twice. These indicate a bug in the
    generator rather than bad luck, so nothing in the library catches them.
    """
