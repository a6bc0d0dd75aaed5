"""Window presence helpers for NotchPanel."""

from .activation_policy import ActivationPolicy, ActivationScheduler, WindowActivationPolicy

__all__ = ["ActivationPolicy", "ActivationScheduler", "WindowActivationPolicy"]
