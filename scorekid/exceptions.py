from typing import List


class ScoreKidError(Exception):
    pass


class InvalidScoreError(ScoreKidError):
    """A manually edited score failed validation; saving is blocked."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid score: " + "; ".join(self.errors))


class NoEventsLoadedError(ScoreKidError):
    pass
