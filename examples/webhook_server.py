"""
Example: Stripe Webhook Endpoint

Serves a webhook endpoint on a local WSGI server. Reads STRIPE_WEBHOOK_SECRET
(and the other STRIPEHOOKS_* settings) from the environment or a .env file.

Forward test events with the Stripe CLI:
    stripe listen --forward-to localhost:8000/
"""

from pathlib import Path
from wsgiref.simple_server import make_server

from stripehooks import (
    Config,
    EventType,
    Manager,
    StripeHooksError,
    WebhookEvent,
    configure_logging,
)

PORT = 8000


def main() -> None:
    project_root = Path(__file__).resolve().parent.parent
    config = Config.from_env(env_file=project_root / ".env")
    logger = configure_logging(config.log_level)
    logger.info("Signing secret: %s", config.masked_secret())

    manager = Manager.from_config(config)

    @manager.on(EventType.CHARGE_SUCCEEDED)
    def charge_succeeded(event: WebhookEvent) -> None:
        charge = event.object or {}
        print(f"[Server] Charge {charge.get('id')} succeeded: {charge.get('amount')}")

    @manager.on(EventType.PAYMENT_INTENT_PAYMENT_FAILED)
    def payment_failed(event: WebhookEvent) -> None:
        print(f"[Server] Payment intent failed (event {event.id})")

    def on_error(err: StripeHooksError) -> None:
        print(f"[Server] Webhook failed: {err}")

    with make_server("", PORT, manager.wsgi_app(on_error)) as httpd:
        mode = "on" if manager.verify else "off"
        print(f"Serving Stripe webhooks at port {PORT} (verification {mode})")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nShutting down...")


if __name__ == "__main__":
    main()
