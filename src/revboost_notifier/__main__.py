"""Dev entry point: python -m revboost_notifier."""
from revboost_notifier.app import create_app
from revboost_notifier.config import (
    EmailProviderConfig,
    LivenessConfig,
    ServiceConfig,
    SmsProviderConfig,
)
from revboost_notifier.service import NotificationService


def main() -> None:
    config = ServiceConfig()
    service = NotificationService.from_config(
        config, EmailProviderConfig(), SmsProviderConfig(), LivenessConfig()
    )
    app = create_app(service, log_level=config.log_level)
    service.start_liveness()
    try:
        app.run(host=config.host, port=config.port)
    finally:
        service.stop_liveness()


if __name__ == "__main__":
    main()
