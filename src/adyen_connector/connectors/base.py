from abc import ABC, abstractmethod
from typing import Dict, Any

from .models import CanonicalOutcome, OptionsLike
from .orchestrator import MultiStepRun, ResultSelection, Step


class ConnectorBase(ABC):
    """
    Uniform payment-operations contract. Primitives are implemented per
    gateway; composite operations are sequenced here from the primitives.
    """

    @abstractmethod
    def authorize(self, money: int, payment_method: Any, options: OptionsLike = None) -> CanonicalOutcome:
        raise NotImplementedError

    @abstractmethod
    def capture(self, money: int, authorization: str, options: OptionsLike = None) -> CanonicalOutcome:
        raise NotImplementedError

    @abstractmethod
    def refund(self, money: int, authorization: str, options: OptionsLike = None) -> CanonicalOutcome:
        raise NotImplementedError

    @abstractmethod
    def void(self, authorization: str, options: OptionsLike = None) -> CanonicalOutcome:
        raise NotImplementedError

    @abstractmethod
    def store(self, payment_method: Any, options: OptionsLike = None) -> CanonicalOutcome:
        """
        Store a credential for later use. The returned authorization can be
        passed back as a StoredCredentialReference.
        """
        raise NotImplementedError

    def purchase(self, money: int, payment_method: Any, options: OptionsLike = None) -> CanonicalOutcome:
        """Authorize, then capture with the resulting authorization."""
        run = MultiStepRun()
        run.run([
            Step(lambda _: self.authorize(money, payment_method, options)),
            Step(lambda authorization: self.capture(money, authorization, options)),
        ])
        return run.primary

    def verify(self, payment_method: Any, options: OptionsLike = None) -> CanonicalOutcome:
        """
        Zero-amount authorization followed by a void that releases the hold.
        The void runs even when the authorization fails, and its result is
        never reported.
        """
        run = MultiStepRun(ResultSelection.FIRST_STEP)
        run.run([
            Step(lambda _: self.authorize(0, payment_method, options)),
            Step(lambda authorization: self.void(authorization, options), ignore_result=True),
        ])
        return run.primary

    def supports_scrubbing(self) -> bool:
        return False

    def scrub(self, transcript: str) -> str:
        raise NotImplementedError

    def health_check(self) -> Dict[str, Any]:
        return {"ok": True}
