"""Base formatter interface."""

from abc import ABC, abstractmethod

from relseed.models import GenerationResult


class RecordFormatter(ABC):
    """
    Turn a generation result into output text.

    Formatters only serialize; they never change generated values, so
    every formatter renders the same records.
    """

    @abstractmethod
    def render(self, result: GenerationResult) -> str:
        """
        Render a generation result.

        Args:
            result: Blocks, diagnostics and keys of one generation run

        Returns:
            Output text
        """
        pass
