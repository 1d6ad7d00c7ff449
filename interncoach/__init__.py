"""InternCoach: personal internship-application tracker."""

__version__ = "1.0.0"
