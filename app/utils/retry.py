# app/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests

from app.domain.errors import ConcurrencyConflict, OrderNumberCollision


def http_retry(*exc_types):
    # domyslnie kazdy blad requests; decrement podaje tylko bledy polaczenia
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(exc_types or requests.RequestException),
    )


def conflict_retry():
    # optimistic locking koszyka + kolizja numeru zamowienia
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.01, max=0.2),
        retry=retry_if_exception_type((ConcurrencyConflict, OrderNumberCollision)),
    )
