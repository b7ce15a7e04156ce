"""
Exceptions raised by the split-flux solver.
"""


class ShllError(Exception):
    """Base class for all solver errors."""


class DispatchError(ShllError):
    """The compute backend could not be created or is unknown."""


class NonPhysicalStateError(ShllError):
    """
    A cell reached a state with no physical meaning.

    Raised by the equation of state when density or pressure is not
    strictly positive (or not finite). The run is aborted; the error is
    never clamped away.

    Attributes:
        cell: Interior cell index (-1 and n_cells denote the ghost cells)
        quantity: Name of the offending quantity ('density' or 'pressure')
        value: Offending value
        step: Time step at which the state was detected (set by the solver)
    """

    def __init__(self, cell: int, quantity: str, value: float, step: int = None):
        self.cell = cell
        self.quantity = quantity
        self.value = value
        self.step = step
        super().__init__(self._message())

    def _message(self) -> str:
        where = f"cell {self.cell}"
        if self.step is not None:
            where += f" at step {self.step}"
        return f"non-physical {self.quantity} {self.value!r} in {where}"

    def at_step(self, step: int) -> 'NonPhysicalStateError':
        """Record the step at which the error occurred and refresh the message."""
        self.step = step
        self.args = (self._message(),)
        return self
