"""
Simple merchant usage example (server-side). Runs a purchase, a partial refund
and a card verification against the in-memory simulator; set
USE_REMOTE_GATEWAY=1 and the ADYEN_* variables to hit the test endpoint instead.
"""
import os
from adyen_connector import AdyenConnector, CardDetails, GatewayConfig, SimulatorTransport


def build_connector() -> AdyenConnector:
    if os.getenv("USE_REMOTE_GATEWAY"):
        return AdyenConnector(GatewayConfig.from_env())
    config = GatewayConfig(username="ws@Company.Example", password="example", merchant_account="ExampleMerchant")
    return AdyenConnector(config, transport=SimulatorTransport())


def run():
    connector = build_connector()
    card = CardDetails(number="4111111111111111", month=3, year=2030, name="Jane Doe", verification_value="737")
    options = {"order_id": "order-123", "shopper_email": "jane@example.com"}

    purchase = connector.purchase(1000, card, options)
    print("Purchase:", purchase.model_dump_json())

    if purchase.success:
        refund = connector.refund(250, purchase.authorization, options)
        print("Refund:", refund.model_dump_json())

    verification = connector.verify(card, options)
    print("Verify:", verification.model_dump_json())


if __name__ == "__main__":
    run()
