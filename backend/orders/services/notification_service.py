import logging

from django.db import transaction

logger = logging.getLogger(__name__)


class OrderNotificationPublisher:
    """
    Singleton publisher for customer-facing order updates.

    Messages go to the channel-layer group ``order_<public tracking id>``.
    Delivery is fire-and-forget: failures are logged and never reach the
    caller.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @staticmethod
    def group_name(tracking_id) -> str:
        return f"order_{tracking_id}"

    def publish(self, tracking_id, payload):
        """Send ``payload`` to everyone following the order with ``tracking_id``."""
        from channels.layers import get_channel_layer
        from asgiref.sync import async_to_sync

        try:
            channel_layer = get_channel_layer()
            if not channel_layer:
                logger.warning("Channel layer not available. Cannot send order update.")
                return

            group_name = self.group_name(tracking_id)
            logger.debug(f"Broadcasting order update to group: {group_name}")
            async_to_sync(channel_layer.group_send)(
                group_name,
                {"type": "order_update", "payload": payload},
            )
        except Exception as e:
            logger.error(f"Error publishing order update for {tracking_id}: {e}")

    def publish_on_commit(self, tracking_id, payload):
        """
        Publish once the surrounding transaction commits, so subscribers never
        see a state that was rolled back.
        """
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(lambda: self.publish(tracking_id, payload))
        else:
            self.publish(tracking_id, payload)


# Create a single, globally accessible instance of the publisher.
order_notification_publisher = OrderNotificationPublisher()
