# adyen_connector package
__version__ = "0.1.0"

from .config import GatewayConfig
from .errors import PreconditionError, TransportError
from .scrubbing import scrub
from .connectors import (
    AdyenConnector,
    CanonicalOutcome,
    CardDetails,
    StoredCredentialReference,
    OperationOptions,
    StandardErrorCode,
    SimulatorTransport,
)
