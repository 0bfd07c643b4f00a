#!/usr/bin/env python3
"""
Confirmation gate: the only point where a rollback can be cancelled.
"""

DEFAULT_TOKEN = 'ROLLBACK'


class ConfirmationPort:
    """Asks an operator to approve an action."""

    def confirm(self, description):
        raise NotImplementedError("Subclasses must implement confirm()")


class ConsoleConfirmation(ConfirmationPort):
    """Prompts on the terminal and requires the exact acknowledgement token."""

    def __init__(self, token=DEFAULT_TOKEN, input_func=None, output=None):
        self.token = token
        self._input = input_func or input
        self._output = output or print

    def confirm(self, description):
        self._output("")
        self._output("!" * 60)
        self._output(f"ABOUT TO RUN: {description}")
        self._output("!" * 60)
        try:
            answer = self._input(f"Type '{self.token}' to continue: ")
        except EOFError:
            return False
        return answer == self.token


def confirm(description, force, port, logger):
    """Return True when the action may proceed."""
    if force:
        logger.warning("Confirmation bypassed (--force): %s", description)
        return True

    if port.confirm(description):
        logger.info("Confirmed by operator: %s", description)
        return True

    logger.warning("Cancelled by operator: %s", description)
    return False
