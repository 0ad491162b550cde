"""Payment gateway connectors."""

from .models import (
    CanonicalOutcome,
    StandardErrorCode,
    CardDetails,
    StoredCredentialReference,
    PaymentMethod,
    Address,
    OperationOptions,
    coerce_payment_method,
)
from .base import ConnectorBase
from .orchestrator import MultiStepRun, ResultSelection, Step
from .normalizer import ActionKind, ERROR_CODE_MAPPING, normalize, parse
from .transport import TransportBase, RequestsTransport
from .adyen_connector import AdyenConnector
from .simulator import (
    SimulatorTransport,
    SimulatorConfig,
    SimulatorScenario,
    SimulatedTransaction,
)

__all__ = [
    # Models
    "CanonicalOutcome",
    "StandardErrorCode",
    "CardDetails",
    "StoredCredentialReference",
    "PaymentMethod",
    "Address",
    "OperationOptions",
    "coerce_payment_method",
    # Core
    "ConnectorBase",
    "MultiStepRun",
    "ResultSelection",
    "Step",
    "ActionKind",
    "ERROR_CODE_MAPPING",
    "normalize",
    "parse",
    # Transport
    "TransportBase",
    "RequestsTransport",
    # Connectors
    "AdyenConnector",
    "SimulatorTransport",
    "SimulatorConfig",
    "SimulatorScenario",
    "SimulatedTransaction",
]
