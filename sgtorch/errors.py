"""Exceptions raised by sgtorch."""

import logging

logger = logging.getLogger(__name__)


class DomainError(ValueError):
    """
    A distribution parameter lies outside its domain.

    Raised before any computation takes place, so no partial result is ever
    returned. Samplers and optimizers should treat it as a rejection of the
    current parameter point.

    Attributes
    ----------
    parameter : str
        Name of the offending parameter (or expression, e.g. ``"p * q"``).
    value : float
        The value that was supplied.
    constraint : str
        Human readable form of the violated constraint.
    """

    def __init__(self, parameter: str, value: float, constraint: str):
        self.parameter = parameter
        self.value = value
        self.constraint = constraint
        super().__init__(f"{parameter} must be {constraint}, got {parameter}={value!r}")


def reject(parameter: str, value: float, constraint: str) -> DomainError:
    """Build a DomainError and log the rejection at DEBUG level."""
    err = DomainError(parameter, value, constraint)
    logger.debug("Rejecting parameter point: %s", err)
    return err
