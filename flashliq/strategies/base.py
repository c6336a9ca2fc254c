# /flashliq/strategies/base.py
# Defines the AbstractStrategy interface.

class AbstractStrategy:
    """
    Interface every execution strategy implements: a dry run that stops after
    the decision, and a live run that may submit.
    """
    async def simulate(self, position_ref: str, path_text: str):
        """Quote and evaluate only; must never submit a transaction."""
        raise NotImplementedError

    async def run(self, position_ref: str, path_text: str):
        """Live execution. Submits at most one transaction."""
        raise NotImplementedError
