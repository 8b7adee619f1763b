"""Application layer - Interception extension and injection members.

Registrations that need policy injection carry an ``InterfaceInterceptor`` and a
``PolicyInjectionBehavior`` member. When the container has an ``Interception``
extension attached, resolved instances of such registrations are handed to the
extension. Call handling itself belongs to the interception pipeline that
subclasses the extension.
"""

from typing import Any, Sequence

from automap_di.domain import InjectionMember, RegistrationEntry


class InterfaceInterceptor(InjectionMember):
    """Marks a registration to be intercepted through its interface."""


class PolicyInjectionBehavior(InjectionMember):
    """Marks a registration to run externally configured call handlers."""


POLICY_INJECTION_MEMBERS = (InterfaceInterceptor(), PolicyInjectionBehavior())


def requires_interception(injection_members: Sequence[InjectionMember]) -> bool:
    return any(isinstance(member, InterfaceInterceptor) for member in injection_members)


class Interception:
    """Container extension that receives instances of intercepted registrations."""

    def intercept(self, instance: Any, registration: RegistrationEntry) -> Any:
        """Return the object handed out for an intercepted registration.

        Args:
            instance: The freshly built instance.
            registration: The registration being resolved.
        """
        return instance
