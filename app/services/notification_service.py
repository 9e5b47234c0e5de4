# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienie back-office o nowym zamowieniu.
    Używa Celery do asynchronicznego przetwarzania.
    Sama wiadomosc WhatsApp nie jest wysylana - klient otwiera link.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, order_number: str):
        send_order_notification_task.delay(user_id, order_id, order_number)


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, order_number: str):
    """
    Celery task - loguje nowe zamowienie oczekujace na wiadomosc WhatsApp od klienta.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_number} (id={order_id}) is pending")

    return {"user_id": user_id, "order_id": order_id, "order_number": order_number, "status": "logged"}
