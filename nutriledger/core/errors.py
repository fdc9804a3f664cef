"""Error taxonomy shared by the core and the shell."""


class NutriLedgerError(Exception):
    """Base class for all ledger errors."""


class InvalidProfile(NutriLedgerError, ValueError):
    """Onboarding input is malformed (non-positive metric, unknown sex)."""


class InvalidFoodItem(NutriLedgerError, ValueError):
    """A food item carries malformed or negative nutrient values."""


class PersistenceError(NutriLedgerError):
    """Loading or saving a snapshot failed at the storage boundary."""


class NotFound(NutriLedgerError, LookupError):
    """A catalog lookup found no matching food."""
