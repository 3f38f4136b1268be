class AdaptEvoError(Exception):
    """Base for all adaptevo exceptions."""

    pass


# High-level families
class ValidationError(AdaptEvoError):
    """Data validation failures."""

    pass


class EvolutionError(AdaptEvoError):
    """Evolution process failures."""

    pass


# Validation subtypes
class InvalidConfigurationError(ValidationError):
    """Strategy or engine configuration outside its documented range."""

    pass


class FeedbackValidationError(ValidationError):
    """Malformed feedback passed to direct adaptation."""

    pass


# Evolution subtypes
class FitnessEvaluationError(EvolutionError):
    """Caller-supplied fitness function raised or returned a non-finite value."""

    pass
